import logging

from ella_rises.exceptions import NotFoundError, UnauthorizedError
from ella_rises.models import EventType
from ella_rises.repositories import (
    CrudRepository,
    EventRegistrationRepository,
    EventRepository,
    SurveyRepository,
)
from ella_rises.services.entity_registry import (
    Entity,
    EntitySpec,
    clean_input,
    coerce_value,
    resolve,
)
from ella_rises.services.survey_service import SurveyService

logger = logging.getLogger(__name__)

FORMS_WITH_EVENTS = {Entity.EVENTS, Entity.EVENT_REGISTRATIONS, Entity.SURVEY_RESULTS}

# Set through admin pages or the registration endpoints, never from a profile
ADMIN_ONLY_FIELDS = (
    "participant_role",
    "event_id",
    "registration_status",
    "registration_attended_flag",
    "registration_check_in_date",
    "registration_check_in_time",
)


def record_to_dict(record) -> dict:
    return {
        column.key: getattr(record, column.key)
        for column in record.__table__.columns
        if column.key != "participant_password"
    }


class CrudService:
    @staticmethod
    def resolve(table) -> EntitySpec:
        return resolve(table)

    @staticmethod
    def form_options(spec: EntitySpec) -> dict:
        """Dropdown data for the add/edit forms of ``spec``."""
        events = []
        event_types = []
        if spec.entity == Entity.EVENTS:
            event_types = EventType.query.order_by(EventType.event_type_name).all()
        if spec.entity in FORMS_WITH_EVENTS:
            events = EventRepository.list_for_forms()
        return {"events": events, "event_types": event_types}

    @staticmethod
    def get(table, record_id) -> dict:
        spec = resolve(table)
        if spec.entity == Entity.SURVEY_RESULTS:
            row = SurveyRepository.find_with_context(record_id)
            if row is None:
                raise NotFoundError(f"No {spec.table} row with id {record_id}")
            survey, event_id, event_name, event_date, user_id = row
            info = record_to_dict(survey)
            info.update(
                event_id=event_id,
                event_name=event_name,
                event_date=event_date,
                user_id=user_id,
            )
            return info
        record = CrudRepository.get(spec.model, spec.primary_key, record_id)
        if record is None:
            raise NotFoundError(f"No {spec.table} row with id {record_id}")
        return record_to_dict(record)

    @staticmethod
    def add(table, form):
        spec = resolve(table)
        attrs = clean_input(spec, form)
        if spec.entity == Entity.SURVEY_RESULTS:
            record = SurveyService.save_survey(attrs)
        else:
            record = CrudRepository.create(spec.model, attrs)
        logger.info(f"Added {spec.table} row {getattr(record, spec.primary_key)}")
        return spec

    @staticmethod
    def update(table, record_id, form):
        spec = resolve(table)
        record = CrudRepository.get(spec.model, spec.primary_key, record_id)
        if record is None:
            raise NotFoundError(f"No {spec.table} row with id {record_id}")
        attrs = clean_input(spec, form, partial=True)
        CrudRepository.update(record, attrs)
        logger.info(f"Updated {spec.table} row {record_id}")
        return spec

    @staticmethod
    def delete(table, record_id):
        spec = resolve(table)
        record = CrudRepository.get(spec.model, spec.primary_key, record_id)
        if record is None:
            raise NotFoundError(f"No {spec.table} row with id {record_id}")
        CrudRepository.delete(record)
        logger.info(f"Deleted {spec.table} row {record_id}")
        return spec

    @staticmethod
    def check_participant_edit(table, record_id, form, user_id):
        """Reject profile edits that would reach beyond the participant's own data.

        Admin-only fields may be resubmitted unchanged, so the edit form can
        be posted back as rendered. Ownership fields must keep pointing at
        ``user_id``.
        """
        spec = resolve(table)
        record = CrudRepository.get(spec.model, spec.primary_key, record_id)
        if record is None:
            raise NotFoundError(f"No {spec.table} row with id {record_id}")

        for field in ADMIN_ONLY_FIELDS:
            if field not in form or field not in spec.columns:
                continue
            value = coerce_value(spec.get_column(field).type, form.get(field), field)
            if value != getattr(record, field):
                raise UnauthorizedError(f"Only administrators can change {field}")

        if "user_id" in form and "user_id" in spec.columns:
            value = coerce_value(
                spec.get_column("user_id").type, form.get("user_id"), "user_id"
            )
            if value != user_id:
                raise UnauthorizedError("Records can only belong to yourself")

        if "event_registration_id" in form and "event_registration_id" in spec.columns:
            registration_id = coerce_value(
                spec.get_column("event_registration_id").type,
                form.get("event_registration_id"),
                "event_registration_id",
            )
            registration = (
                EventRegistrationRepository.find_by_id(registration_id)
                if registration_id is not None
                else None
            )
            if registration is None or registration.user_id != user_id:
                raise UnauthorizedError(
                    "Surveys can only be linked to your own registrations"
                )

    @staticmethod
    def owner_id(table, record_id):
        """User that a row belongs to, used to keep profile edits to one's own data."""
        spec = resolve(table)
        if spec.entity == Entity.USERS:
            return record_id
        if spec.entity == Entity.SURVEY_RESULTS:
            row = SurveyRepository.find_with_context(record_id)
            return row.user_id if row else None
        record = CrudRepository.get(spec.model, spec.primary_key, record_id)
        return getattr(record, "user_id", None) if record else None
