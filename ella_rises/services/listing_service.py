from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import extract, func, select

from ella_rises.extensions import db
from ella_rises.models import (
    Donation,
    Event,
    EventRegistration,
    EventType,
    Milestone,
    SurveyResult,
    User,
)
from ella_rises.models.enums import UserRole
from ella_rises.services.query_filters import (
    ALL,
    FULL_NAME,
    date_part_clause,
    flag_in_clause,
    full_name_clause,
    in_clause,
    int_in_clause,
    normalize_sort_order,
    number_in_clause,
    order_clause,
    presence_clause,
    read_array,
    text_search_clause,
)

# Sum of a participant's donations; NULL when they have never donated
TOTAL_DONATIONS = (
    select(func.sum(Donation.donation_amount))
    .where(Donation.user_id == User.user_id)
    .correlate(User)
    .scalar_subquery()
)

CLAUSE_BUILDERS = {
    "in": in_clause,
    "int_in": int_in_clause,
    "number_in": number_in_clause,
    "flag": flag_in_clause,
    "presence": presence_clause,
    "month": lambda column, values: date_part_clause("month", column, values),
    "year": lambda column, values: date_part_clause("year", column, values),
}


@dataclass
class FilterField:
    param: str
    column: Any
    kind: str = "in"


@dataclass
class ListingDefinition:
    name: str
    base_query: Callable
    default_search: str
    search_columns: Dict[str, Any]
    sort_columns: Dict[str, Any]
    default_order: Callable
    filters: List[FilterField] = field(default_factory=list)
    name_columns: Optional[tuple] = None
    numeric_search: tuple = ()
    options: Optional[Callable] = None
    option_keys: tuple = ()


@dataclass
class ListingResult:
    rows: List[dict]
    filters: Dict[str, Any]


def available_years(date_column):
    rows = (
        db.session.query(extract("year", date_column).label("year"))
        .filter(date_column.isnot(None))
        .distinct()
        .all()
    )
    years = {int(float(row.year)) for row in rows if row.year is not None}
    return sorted(years, reverse=True)


def distinct_values(column, *criteria):
    rows = (
        db.session.query(column)
        .filter(column.isnot(None), *criteria)
        .distinct()
        .order_by(column.asc())
        .all()
    )
    return [value for (value,) in rows if str(value).strip()]


# Base queries ----------------------------------------------------------------


def _users_query():
    return db.session.query(
        User.user_id,
        User.participant_email,
        User.participant_first_name,
        User.participant_last_name,
        User.participant_dob,
        User.participant_phone,
        User.participant_city,
        User.participant_state,
        User.participant_zip,
        User.participant_school_or_employer,
        User.participant_field_of_interest,
        TOTAL_DONATIONS.label("total_donations"),
    ).filter(User.participant_role == UserRole.PARTICIPANT.value)


def _events_query():
    return db.session.query(
        Event.event_id,
        Event.event_type_id,
        Event.event_name,
        Event.event_date,
        Event.event_start_time,
        Event.event_end_time,
        Event.event_location,
        Event.event_capacity,
        Event.registration_deadline_date,
        Event.registration_deadline_time,
        EventType.event_type_name.label("event_type"),
    ).outerjoin(EventType, Event.event_type_id == EventType.event_type_id)


def _surveys_query():
    return (
        db.session.query(
            SurveyResult.survey_id,
            SurveyResult.event_registration_id,
            User.participant_first_name,
            User.participant_last_name,
            Event.event_name,
            Event.event_date,
            SurveyResult.survey_satisfaction_score,
            SurveyResult.survey_usefulness_score,
            SurveyResult.survey_instructor_score,
            SurveyResult.survey_recommendation_score,
            SurveyResult.survey_overall_score,
            SurveyResult.survey_nps_bucket,
            SurveyResult.survey_comments,
            SurveyResult.submission_date.label("survey_submission_date"),
            SurveyResult.submission_time.label("survey_submission_time"),
        )
        .join(
            EventRegistration,
            SurveyResult.event_registration_id == EventRegistration.event_registration_id,
        )
        .join(User, EventRegistration.user_id == User.user_id)
        .join(Event, EventRegistration.event_id == Event.event_id)
    )


def _milestones_query():
    return db.session.query(
        Milestone.milestone_id,
        Milestone.user_id,
        Milestone.milestone_title,
        Milestone.milestone_date,
        Milestone.milestone_category,
        User.participant_first_name,
        User.participant_last_name,
    ).join(User, Milestone.user_id == User.user_id)


def _donations_query():
    return db.session.query(
        Donation.donation_id,
        Donation.user_id,
        Donation.donation_date,
        Donation.donation_amount,
        User.participant_first_name,
        User.participant_last_name,
    ).join(User, Donation.user_id == User.user_id)


def _registrations_query():
    return (
        db.session.query(
            EventRegistration.event_registration_id,
            EventRegistration.user_id,
            EventRegistration.event_id,
            EventRegistration.registration_status,
            EventRegistration.registration_attended_flag,
            EventRegistration.registration_created_at_date,
            EventRegistration.registration_created_at_time,
            EventRegistration.registration_check_in_date,
            EventRegistration.registration_check_in_time,
            User.participant_first_name,
            User.participant_last_name,
            Event.event_name,
            Event.event_date,
        )
        .join(User, EventRegistration.user_id == User.user_id)
        .join(Event, EventRegistration.event_id == Event.event_id)
    )


# Option lists ----------------------------------------------------------------


def _user_options():
    is_participant = User.participant_role == UserRole.PARTICIPANT.value
    return {
        "cityOptions": distinct_values(User.participant_city, is_participant),
        "schoolOptions": distinct_values(
            User.participant_school_or_employer, is_participant
        ),
        "interestOptions": distinct_values(
            User.participant_field_of_interest, is_participant
        ),
    }


def _event_options():
    return {
        "availableYears": available_years(Event.event_date),
        "eventNameOptions": distinct_values(Event.event_name),
        "locationOptions": distinct_values(Event.event_location),
        "eventTypeOptions": distinct_values(EventType.event_type_name),
    }


def _survey_options():
    return {
        "eventNameOptions": distinct_values(Event.event_name),
        "npsOptions": distinct_values(SurveyResult.survey_nps_bucket),
    }


def _milestone_options():
    return {
        "milestoneTitleOptions": distinct_values(Milestone.milestone_title),
        "categoryOptions": distinct_values(Milestone.milestone_category),
    }


def _donation_options():
    return {"availableYears": available_years(Donation.donation_date)}


def _registration_options():
    return {
        "availableYears": available_years(Event.event_date),
        "eventNameOptions": distinct_values(Event.event_name),
    }


PERSON_COLUMNS = {
    "participant_first_name": User.participant_first_name,
    "participant_last_name": User.participant_last_name,
}

LISTINGS = {
    "users": ListingDefinition(
        name="users",
        base_query=_users_query,
        default_search=FULL_NAME,
        name_columns=(User.participant_first_name, User.participant_last_name),
        search_columns={
            **PERSON_COLUMNS,
            "participant_email": User.participant_email,
            "participant_phone": User.participant_phone,
            "participant_city": User.participant_city,
            "participant_school_or_employer": User.participant_school_or_employer,
            "participant_field_of_interest": User.participant_field_of_interest,
        },
        filters=[
            FilterField("city", User.participant_city),
            FilterField("school", User.participant_school_or_employer),
            FilterField("interest", User.participant_field_of_interest),
            FilterField("donations", TOTAL_DONATIONS, "presence"),
        ],
        sort_columns={
            **PERSON_COLUMNS,
            "user_id": User.user_id,
            "participant_email": User.participant_email,
            "participant_city": User.participant_city,
            "participant_school_or_employer": User.participant_school_or_employer,
            "participant_field_of_interest": User.participant_field_of_interest,
            "total_donations": TOTAL_DONATIONS,
        },
        default_order=lambda: [User.user_id.asc()],
        options=_user_options,
        option_keys=("cityOptions", "schoolOptions", "interestOptions"),
    ),
    "events": ListingDefinition(
        name="events",
        base_query=_events_query,
        default_search="event_name",
        search_columns={
            "event_name": Event.event_name,
            "event_location": Event.event_location,
            "event_date": Event.event_date,
            "event_start_time": Event.event_start_time,
            "event_capacity": Event.event_capacity,
            "event_type": EventType.event_type_name,
        },
        numeric_search=("event_capacity",),
        filters=[
            FilterField("eventNames", Event.event_name),
            FilterField("locations", Event.event_location),
            FilterField("eventTypes", EventType.event_type_name),
            FilterField("months", Event.event_date, "month"),
            FilterField("years", Event.event_date, "year"),
        ],
        sort_columns={
            "event_id": Event.event_id,
            "event_name": Event.event_name,
            "event_date": Event.event_date,
            "event_start_time": Event.event_start_time,
            "event_end_time": Event.event_end_time,
            "event_location": Event.event_location,
            "event_capacity": Event.event_capacity,
            "registration_deadline_date": Event.registration_deadline_date,
            "event_type": EventType.event_type_name,
        },
        default_order=lambda: [Event.event_date.asc()],
        options=_event_options,
        option_keys=(
            "availableYears",
            "eventNameOptions",
            "locationOptions",
            "eventTypeOptions",
        ),
    ),
    "surveys": ListingDefinition(
        name="surveys",
        base_query=_surveys_query,
        default_search=FULL_NAME,
        name_columns=(User.participant_first_name, User.participant_last_name),
        search_columns={
            **PERSON_COLUMNS,
            "event_name": Event.event_name,
            "event_date": Event.event_date,
            "survey_nps_bucket": SurveyResult.survey_nps_bucket,
        },
        filters=[
            FilterField("eventNames", Event.event_name),
            FilterField(
                "satisfaction", SurveyResult.survey_satisfaction_score, "int_in"
            ),
            FilterField("usefulness", SurveyResult.survey_usefulness_score, "int_in"),
            FilterField("instructor", SurveyResult.survey_instructor_score, "int_in"),
            FilterField(
                "recommendation", SurveyResult.survey_recommendation_score, "int_in"
            ),
            FilterField("overall", SurveyResult.survey_overall_score, "number_in"),
            FilterField("nps", SurveyResult.survey_nps_bucket),
        ],
        sort_columns={
            **PERSON_COLUMNS,
            "event_name": Event.event_name,
            "event_date": Event.event_date,
            "survey_nps_bucket": SurveyResult.survey_nps_bucket,
            "survey_overall_score": SurveyResult.survey_overall_score,
            "survey_submission_date": SurveyResult.submission_date,
        },
        default_order=lambda: [SurveyResult.survey_id.asc()],
        options=_survey_options,
        option_keys=("eventNameOptions", "npsOptions"),
    ),
    "milestones": ListingDefinition(
        name="milestones",
        base_query=_milestones_query,
        default_search=FULL_NAME,
        name_columns=(User.participant_first_name, User.participant_last_name),
        search_columns={
            **PERSON_COLUMNS,
            "milestone_title": Milestone.milestone_title,
            "milestone_category": Milestone.milestone_category,
            "milestone_date": Milestone.milestone_date,
        },
        filters=[
            FilterField("milestoneTitles", Milestone.milestone_title),
            FilterField("categories", Milestone.milestone_category),
        ],
        sort_columns={
            **PERSON_COLUMNS,
            "milestone_id": Milestone.milestone_id,
            "milestone_title": Milestone.milestone_title,
            "milestone_date": Milestone.milestone_date,
            "milestone_category": Milestone.milestone_category,
        },
        default_order=lambda: [Milestone.milestone_date.desc().nulls_last()],
        options=_milestone_options,
        option_keys=("milestoneTitleOptions", "categoryOptions"),
    ),
    "donations": ListingDefinition(
        name="donations",
        base_query=_donations_query,
        default_search=FULL_NAME,
        name_columns=(User.participant_first_name, User.participant_last_name),
        search_columns={
            **PERSON_COLUMNS,
            "donation_date": Donation.donation_date,
            "donation_amount": Donation.donation_amount,
        },
        filters=[
            FilterField("months", Donation.donation_date, "month"),
            FilterField("years", Donation.donation_date, "year"),
        ],
        sort_columns={
            **PERSON_COLUMNS,
            "donation_id": Donation.donation_id,
            "donation_date": Donation.donation_date,
            "donation_amount": Donation.donation_amount,
        },
        default_order=lambda: [Donation.donation_date.desc().nulls_last()],
        options=_donation_options,
        option_keys=("availableYears",),
    ),
    "event_registrations": ListingDefinition(
        name="event_registrations",
        base_query=_registrations_query,
        default_search=FULL_NAME,
        name_columns=(User.participant_first_name, User.participant_last_name),
        search_columns={**PERSON_COLUMNS, "event_name": Event.event_name},
        filters=[
            FilterField("eventNames", Event.event_name),
            FilterField("months", Event.event_date, "month"),
            FilterField("years", Event.event_date, "year"),
            FilterField("registrationStatus", EventRegistration.registration_status),
            FilterField(
                "registrationAttendedFlag",
                EventRegistration.registration_attended_flag,
                "flag",
            ),
        ],
        sort_columns={
            **PERSON_COLUMNS,
            "event_name": Event.event_name,
            "event_date": Event.event_date,
            "event_registration_id": EventRegistration.event_registration_id,
            "registration_status": EventRegistration.registration_status,
            "registration_attended_flag": EventRegistration.registration_attended_flag,
            "registration_created_at_date": EventRegistration.registration_created_at_date,
            "registration_check_in_date": EventRegistration.registration_check_in_date,
        },
        default_order=lambda: [Event.event_date.desc()],
        options=_registration_options,
        option_keys=("availableYears", "eventNameOptions"),
    ),
}


class ListingService:
    @staticmethod
    def get_definition(name) -> ListingDefinition:
        return LISTINGS[name]

    @staticmethod
    def build_query(definition: ListingDefinition, args):
        """Apply search, filters and ordering from ``args``.

        Returns the query and the echo of the user's selections used to
        re-render the filter form.
        """
        search_column = args.get("searchColumn") or definition.default_search
        if search_column != FULL_NAME and search_column not in definition.search_columns:
            search_column = definition.default_search
        if search_column == FULL_NAME and not definition.name_columns:
            search_column = definition.default_search
        search_value = args.get("searchValue") or ""
        sort_column = args.get("sortColumn") or ""
        sort_order = normalize_sort_order(args.get("sortOrder"))

        query = definition.base_query()

        term = search_value.strip()
        if term:
            clause = None
            if search_column == FULL_NAME:
                clause = full_name_clause(*definition.name_columns, term)
            elif search_column in definition.numeric_search:
                try:
                    clause = definition.search_columns[search_column] == int(term)
                except ValueError:
                    clause = None
            else:
                clause = text_search_clause(
                    definition.search_columns[search_column], term
                )
            if clause is not None:
                query = query.filter(clause)

        filters = {"searchColumn": search_column, "searchValue": search_value}
        for filter_field in definition.filters:
            values = read_array(args, filter_field.param)
            filters[filter_field.param] = values
            clause = CLAUSE_BUILDERS[filter_field.kind](filter_field.column, values)
            if clause is not None:
                query = query.filter(clause)

        if sort_column in definition.sort_columns:
            query = query.order_by(
                order_clause(definition.sort_columns[sort_column], sort_order)
            )
        else:
            sort_column = ""
            query = query.order_by(*definition.default_order())

        filters["sortColumn"] = sort_column
        filters["sortOrder"] = sort_order
        return query, filters

    @staticmethod
    def run(name, args) -> ListingResult:
        definition = ListingService.get_definition(name)
        query, filters = ListingService.build_query(definition, args)
        rows = [row._asdict() for row in query.all()]
        if definition.options:
            filters.update(definition.options())
        return ListingResult(rows=rows, filters=filters)

    @staticmethod
    def empty(name) -> ListingResult:
        """Result used when the list query fails: no rows, default selections."""
        definition = ListingService.get_definition(name)
        filters = {"searchColumn": definition.default_search, "searchValue": ""}
        for filter_field in definition.filters:
            filters[filter_field.param] = [ALL]
        filters["sortColumn"] = ""
        filters["sortOrder"] = "asc"
        for key in definition.option_keys:
            filters[key] = []
        return ListingResult(rows=[], filters=filters)

    @staticmethod
    def list_users(args) -> ListingResult:
        return ListingService.run("users", args)

    @staticmethod
    def list_events(args) -> ListingResult:
        return ListingService.run("events", args)

    @staticmethod
    def list_surveys(args) -> ListingResult:
        return ListingService.run("surveys", args)

    @staticmethod
    def list_milestones(args) -> ListingResult:
        return ListingService.run("milestones", args)

    @staticmethod
    def list_donations(args) -> ListingResult:
        return ListingService.run("donations", args)

    @staticmethod
    def list_event_registrations(args) -> ListingResult:
        return ListingService.run("event_registrations", args)
