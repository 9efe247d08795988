import logging

from werkzeug.security import check_password_hash

from ella_rises.exceptions import MissingFieldsError
from ella_rises.models import User
from ella_rises.models.enums import UserRole
from ella_rises.repositories import EventRegistrationRepository, UserRepository
from ella_rises.services.entity_registry import REGISTRY, Entity, clean_input

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SIGNUP_REQUIRED = [
    "participant_email",
    "participant_password",
    "participant_first_name",
    "participant_last_name",
]


class UserService:
    @staticmethod
    def sign_up(form):
        missing = [field for field in SIGNUP_REQUIRED if not form.get(field)]
        if missing:
            raise MissingFieldsError(missing)

        try:
            if UserRepository.find_by_email(form["participant_email"]):
                logger.warning(
                    f"Signup attempt with existing email: {form['participant_email']}"
                )
                raise ValueError("User already exists")

            signup_fields = {
                key: form.get(key) for key in form.keys() if key != "participant_role"
            }
            attrs = clean_input(REGISTRY[Entity.USERS], signup_fields)
            attrs["participant_role"] = UserRole.PARTICIPANT.value

            user = UserRepository.sign_up(User(**attrs))
            logger.info(f"User created successfully: {user.participant_email}")
            return user
        except ValueError as e:
            logger.error(f"Signup error: {str(e)}")
            raise

    @staticmethod
    def sign_in(email, password):
        user = UserRepository.find_by_email(email or "")
        if not user:
            logger.warning(f"Login attempt with non-existent email: {email}")
            raise ValueError("Invalid email or password")

        if not user.participant_password or not check_password_hash(
            user.participant_password, password or ""
        ):
            logger.warning(f"Failed login attempt for user: {email}")
            raise ValueError("Invalid email or password")

        logger.info(f"User logged in successfully: {email}")
        return user

    @staticmethod
    def get_profile(user_id: int):
        user = UserRepository.find_by_id(user_id)
        if not user:
            return None
        registrations = [
            {
                "event_registration_id": registration.event_registration_id,
                "event_id": event.event_id,
                "event_name": event.event_name,
                "event_date": event.event_date,
                "registration_status": registration.registration_status,
                "registration_attended_flag": registration.registration_attended_flag,
            }
            for registration, event in EventRegistrationRepository.find_for_user(user_id)
        ]
        return {
            "user": user,
            "total_donations": UserRepository.total_donations(user_id) or 0,
            "donations": sorted(user.donations, key=lambda d: d.donation_id, reverse=True),
            "milestones": user.milestones,
            "registrations": registrations,
        }
