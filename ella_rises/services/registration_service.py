import logging
from datetime import datetime, time

from ella_rises.models.enums import ACTIVE_STATUSES, RegistrationStatus
from ella_rises.repositories import EventRegistrationRepository, EventRepository
from ella_rises.utils.clock import now_local

logger = logging.getLogger(__name__)


class RegistrationService:
    @staticmethod
    def register_for_event(event_id: int, user_id: int):
        logger.info(f"Registration attempt: user {user_id} for event {event_id}")

        event = EventRepository.get_event(event_id)
        if not event:
            return {"success": False, "error": f"Event with ID {event_id} not found"}, 404

        now = now_local()
        if event.registration_deadline_date:
            deadline = datetime.combine(
                event.registration_deadline_date,
                event.registration_deadline_time or time.max,
            )
            if now > deadline:
                return {"success": False, "error": "Registration for this event has closed"}, 400

        existing = EventRegistrationRepository.find_by_event_and_user(event_id, user_id)
        if existing and existing.registration_status in ACTIVE_STATUSES:
            logger.warning(f"User {user_id} already registered for event {event_id}")
            return {"success": False, "error": "You are already registered for this event"}, 400

        if event.event_capacity is not None:
            registered = EventRegistrationRepository.count_active_by_event(event_id)
            if registered >= event.event_capacity:
                logger.info(
                    f"Event {event_id} full: {registered}/{event.event_capacity}"
                )
                return {"success": False, "error": "This event is full"}, 400

        created = {
            "registration_created_at_date": now.date(),
            "registration_created_at_time": now.time().replace(microsecond=0),
        }
        if existing:
            EventRegistrationRepository.update_status(
                existing,
                RegistrationStatus.REGISTERED.value,
                registration_attended_flag=False,
                **created,
            )
            logger.info(f"Reactivated registration {existing.event_registration_id}")
        else:
            EventRegistrationRepository.register(
                {
                    "event_id": event_id,
                    "user_id": user_id,
                    "registration_status": RegistrationStatus.REGISTERED.value,
                    "registration_attended_flag": False,
                    **created,
                }
            )
            logger.info(f"Registered user {user_id} for event {event_id}")
        return {"success": True, "message": "Successfully registered for event"}, 200

    @staticmethod
    def cancel_registration(event_id: int, user_id: int):
        registration = EventRegistrationRepository.find_by_event_and_user(
            event_id, user_id
        )
        if (
            not registration
            or registration.registration_status == RegistrationStatus.CANCELLED.value
        ):
            return {"success": False, "error": "No active registration found"}, 404
        if registration.registration_status == RegistrationStatus.ATTENDED.value:
            return {
                "success": False,
                "error": "Attended registrations cannot be cancelled",
            }, 400

        EventRegistrationRepository.update_status(
            registration, RegistrationStatus.CANCELLED.value
        )
        logger.info(f"Cancelled registration for user {user_id}, event {event_id}")
        return {"success": True, "message": "Registration cancelled"}, 200
