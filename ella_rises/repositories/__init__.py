from ella_rises.repositories.crud_repository import CrudRepository
from ella_rises.repositories.user_repository import UserRepository
from ella_rises.repositories.event_repository import EventRepository
from ella_rises.repositories.event_registration_repository import (
    EventRegistrationRepository,
)
from ella_rises.repositories.survey_repository import SurveyRepository
