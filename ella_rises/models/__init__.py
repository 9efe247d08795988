from ella_rises.models.user import User
from ella_rises.models.event_type import EventType
from ella_rises.models.event import Event
from ella_rises.models.event_registration import EventRegistration
from ella_rises.models.survey_result import SurveyResult
from ella_rises.models.milestone import Milestone
from ella_rises.models.donation import Donation
from ella_rises.models.enums import UserRole, RegistrationStatus, NpsBucket
