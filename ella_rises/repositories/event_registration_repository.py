from typing import Dict, List, Set

from sqlalchemy import func, or_

from ella_rises.extensions import db
from ella_rises.models import Event, EventRegistration
from ella_rises.models.enums import ACTIVE_STATUSES


def _counts_toward_attendance():
    # The attended flag is checked on its own as older rows were not kept in sync
    return or_(
        EventRegistration.registration_status.in_(ACTIVE_STATUSES),
        EventRegistration.registration_attended_flag.is_(True),
    )


class EventRegistrationRepository:
    @staticmethod
    def find_by_id(event_registration_id: int) -> EventRegistration:
        return EventRegistration.query.filter_by(
            event_registration_id=event_registration_id
        ).first()

    @staticmethod
    def find_by_event_and_user(event_id: int, user_id: int) -> EventRegistration:
        return EventRegistration.query.filter_by(
            event_id=event_id, user_id=user_id
        ).first()

    @staticmethod
    def count_active_by_event(event_id: int) -> int:
        return (
            EventRegistration.query.filter(EventRegistration.event_id == event_id)
            .filter(_counts_toward_attendance())
            .count()
        )

    @staticmethod
    def counts_by_event(event_ids: List[int]) -> Dict[int, int]:
        if not event_ids:
            return {}
        rows = (
            db.session.query(
                EventRegistration.event_id, func.count(EventRegistration.event_registration_id)
            )
            .filter(EventRegistration.event_id.in_(event_ids))
            .filter(_counts_toward_attendance())
            .group_by(EventRegistration.event_id)
            .all()
        )
        return {event_id: count for event_id, count in rows}

    @staticmethod
    def active_event_ids_for_user(user_id: int) -> Set[int]:
        rows = (
            db.session.query(EventRegistration.event_id)
            .filter(
                EventRegistration.user_id == user_id,
                EventRegistration.registration_status.in_(ACTIVE_STATUSES),
            )
            .all()
        )
        return {event_id for (event_id,) in rows}

    @staticmethod
    def find_for_user(user_id: int):
        return (
            db.session.query(EventRegistration, Event)
            .join(Event, EventRegistration.event_id == Event.event_id)
            .filter(EventRegistration.user_id == user_id)
            .order_by(Event.event_date.desc())
            .all()
        )

    @staticmethod
    def register(attrs) -> EventRegistration:
        registration = EventRegistration(**attrs)
        db.session.add(registration)
        db.session.commit()
        return registration

    @staticmethod
    def update_status(registration: EventRegistration, status: str, **attrs):
        registration.registration_status = status
        for key, value in attrs.items():
            setattr(registration, key, value)
        db.session.commit()
        return registration
