from ella_rises.services.user_service import UserService
from ella_rises.services.listing_service import ListingService
from ella_rises.services.calendar_service import CalendarService
from ella_rises.services.crud_service import CrudService
from ella_rises.services.survey_service import SurveyService
from ella_rises.services.registration_service import RegistrationService
