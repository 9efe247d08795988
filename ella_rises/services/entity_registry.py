"""Single lookup of every table the generic add/edit/delete routes may touch."""
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Tuple

from sqlalchemy import types as sqltypes
from werkzeug.security import generate_password_hash

from ella_rises.exceptions import MissingFieldsError, UnknownFieldsError, UnknownTableError
from ella_rises.models import (
    Donation,
    Event,
    EventRegistration,
    EventType,
    Milestone,
    SurveyResult,
    User,
)
from ella_rises.models.enums import NpsBucket, RegistrationStatus, UserRole

TRUTHY = {"1", "true", "t", "yes", "y", "on"}

# Columns restricted to a fixed set of values
CHOICE_COLUMNS = {
    "participant_role": UserRole,
    "registration_status": RegistrationStatus,
    "survey_nps_bucket": NpsBucket,
}


class Entity(Enum):
    USERS = "users"
    EVENTS = "events"
    EVENT_TYPES = "event_types"
    EVENT_REGISTRATIONS = "event_registrations"
    SURVEY_RESULTS = "survey_results"
    MILESTONES = "milestones"
    DONATIONS = "donations"


@dataclass(frozen=True)
class EntitySpec:
    entity: Entity
    model: type
    primary_key: str
    columns: Tuple[str, ...]
    required: Tuple[str, ...]
    list_route: str

    @property
    def table(self):
        return self.entity.value

    def get_column(self, name):
        return getattr(self.model, name)


REGISTRY = {
    Entity.USERS: EntitySpec(
        entity=Entity.USERS,
        model=User,
        primary_key="user_id",
        columns=(
            "participant_email",
            "participant_password",
            "participant_first_name",
            "participant_last_name",
            "participant_dob",
            "participant_role",
            "participant_phone",
            "participant_city",
            "participant_state",
            "participant_zip",
            "participant_school_or_employer",
            "participant_field_of_interest",
        ),
        required=("participant_email", "participant_first_name", "participant_last_name"),
        list_route="/users",
    ),
    Entity.EVENTS: EntitySpec(
        entity=Entity.EVENTS,
        model=Event,
        primary_key="event_id",
        columns=(
            "event_type_id",
            "event_name",
            "event_date",
            "event_start_time",
            "event_end_time",
            "event_location",
            "event_capacity",
            "registration_deadline_date",
            "registration_deadline_time",
        ),
        required=("event_name", "event_date"),
        list_route="/events",
    ),
    Entity.EVENT_TYPES: EntitySpec(
        entity=Entity.EVENT_TYPES,
        model=EventType,
        primary_key="event_type_id",
        columns=("event_type_name", "event_type_description"),
        required=("event_type_name",),
        list_route="/events",
    ),
    Entity.EVENT_REGISTRATIONS: EntitySpec(
        entity=Entity.EVENT_REGISTRATIONS,
        model=EventRegistration,
        primary_key="event_registration_id",
        columns=(
            "user_id",
            "event_id",
            "registration_status",
            "registration_attended_flag",
            "registration_created_at_date",
            "registration_created_at_time",
            "registration_check_in_date",
            "registration_check_in_time",
        ),
        required=("user_id", "event_id"),
        list_route="/event_registrations",
    ),
    Entity.SURVEY_RESULTS: EntitySpec(
        entity=Entity.SURVEY_RESULTS,
        model=SurveyResult,
        primary_key="survey_id",
        columns=(
            "event_registration_id",
            "survey_satisfaction_score",
            "survey_usefulness_score",
            "survey_instructor_score",
            "survey_recommendation_score",
            "survey_overall_score",
            "survey_nps_bucket",
            "survey_comments",
            "submission_date",
            "submission_time",
        ),
        required=("event_registration_id",),
        list_route="/surveys",
    ),
    Entity.MILESTONES: EntitySpec(
        entity=Entity.MILESTONES,
        model=Milestone,
        primary_key="milestone_id",
        columns=("user_id", "milestone_title", "milestone_date", "milestone_category"),
        required=("user_id", "milestone_title"),
        list_route="/milestones",
    ),
    Entity.DONATIONS: EntitySpec(
        entity=Entity.DONATIONS,
        model=Donation,
        primary_key="donation_id",
        columns=("user_id", "donation_date", "donation_amount"),
        required=("user_id",),
        list_route="/donations",
    ),
}

# Older pages still post to /participants
ALIASES = {"participants": Entity.USERS}


def resolve(table) -> EntitySpec:
    if table in ALIASES:
        return REGISTRY[ALIASES[table]]
    try:
        return REGISTRY[Entity(table)]
    except ValueError:
        raise UnknownTableError(table)


def coerce_value(column_type, raw, field):
    """Convert a submitted form string into the Python type of its column."""
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if raw == "":
            return None
    try:
        if isinstance(column_type, sqltypes.Boolean):
            if isinstance(raw, bool):
                return raw
            return str(raw).lower() in TRUTHY
        if isinstance(column_type, sqltypes.Integer):
            return int(raw)
        if isinstance(column_type, sqltypes.Numeric):
            return Decimal(str(raw))
        if isinstance(column_type, sqltypes.Date):
            return raw if isinstance(raw, date) else date.fromisoformat(raw)
        if isinstance(column_type, sqltypes.Time):
            return raw if isinstance(raw, time) else time.fromisoformat(raw)
    except (ValueError, InvalidOperation):
        raise ValueError(f"Invalid value for {field}: {raw}")
    return raw


def clean_input(spec: EntitySpec, form, partial=False) -> dict:
    """Validate submitted fields against the entity's persistable columns.

    Unknown fields are rejected. With ``partial`` (edits) only the submitted
    fields are returned, otherwise every required column must have a value.
    """
    submitted = {key: form.get(key) for key in form.keys()}
    unknown = sorted(set(submitted) - set(spec.columns))
    if unknown:
        raise UnknownFieldsError(unknown)

    attrs = {}
    for field, raw in submitted.items():
        column_type = spec.get_column(field).type
        attrs[field] = coerce_value(column_type, raw, field)
        choices = CHOICE_COLUMNS.get(field)
        if choices and attrs[field] is not None:
            if attrs[field] not in {choice.value for choice in choices}:
                raise ValueError(f"Invalid value for {field}: {attrs[field]}")

    if "participant_password" in attrs:
        password = attrs.pop("participant_password")
        if password:
            attrs["participant_password"] = generate_password_hash(password)

    if partial:
        missing = [f for f in spec.required if f in attrs and attrs[f] is None]
    else:
        missing = [f for f in spec.required if attrs.get(f) is None]
    if missing:
        raise MissingFieldsError(missing)
    return attrs
