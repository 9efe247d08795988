from flask import Blueprint, current_app, render_template, request

from ella_rises.extensions import db
from ella_rises.services import ListingService
from ella_rises.session_context import get_session_context
from ella_rises.utils.auth import admin_required

dashboard_bp = Blueprint("dashboard", __name__)

# Columns shown on each maintenance page, in display order
DISPLAY_COLUMNS = {
    "users": [
        "participant_first_name",
        "participant_last_name",
        "participant_email",
        "participant_city",
        "participant_school_or_employer",
        "participant_field_of_interest",
        "total_donations",
    ],
    "events": [
        "event_name",
        "event_type",
        "event_date",
        "event_start_time",
        "event_end_time",
        "event_location",
        "event_capacity",
    ],
    "surveys": [
        "participant_first_name",
        "participant_last_name",
        "event_name",
        "event_date",
        "survey_overall_score",
        "survey_nps_bucket",
        "survey_comments",
    ],
    "milestones": [
        "participant_first_name",
        "participant_last_name",
        "milestone_title",
        "milestone_category",
        "milestone_date",
    ],
    "donations": [
        "participant_first_name",
        "participant_last_name",
        "donation_date",
        "donation_amount",
    ],
    "event_registrations": [
        "participant_first_name",
        "participant_last_name",
        "event_name",
        "event_date",
        "registration_status",
        "registration_attended_flag",
    ],
}

# Table used by the add/edit/delete links on each page
TABLES = {"surveys": "survey_results"}
PRIMARY_KEYS = {
    "users": "user_id",
    "events": "event_id",
    "surveys": "survey_id",
    "milestones": "milestone_id",
    "donations": "donation_id",
    "event_registrations": "event_registration_id",
}


def render_listing(name, title):
    context = get_session_context()
    message, message_type = context.pop_flash()

    # Deletes report back through the query string
    if not message and request.args.get("message"):
        message = request.args["message"]
        message_type = request.args.get("messageType", "success")

    try:
        result = ListingService.run(name, request.args)
    except Exception as e:
        current_app.logger.error(f"Error loading {name}: {str(e)}")
        db.session.rollback()
        result = ListingService.empty(name)
        message = f"Error loading {title.lower()}"
        message_type = "danger"

    return render_template(
        "list.html",
        listing=name,
        title=title,
        table_name=TABLES.get(name, name),
        primary_key=PRIMARY_KEYS[name],
        columns=DISPLAY_COLUMNS[name],
        rows=result.rows,
        filters=result.filters,
        message=message,
        message_type=message_type,
    )


@dashboard_bp.route("/users", methods=["GET"])
@dashboard_bp.route("/participants", methods=["GET"])
@admin_required
def list_users():
    return render_listing("users", "Participants")


@dashboard_bp.route("/events", methods=["GET"])
@admin_required
def list_events():
    return render_listing("events", "Events")


@dashboard_bp.route("/surveys", methods=["GET"])
@admin_required
def list_surveys():
    return render_listing("surveys", "Surveys")


@dashboard_bp.route("/milestones", methods=["GET"])
@admin_required
def list_milestones():
    return render_listing("milestones", "Milestones")


@dashboard_bp.route("/donations", methods=["GET"])
@admin_required
def list_donations():
    return render_listing("donations", "Donations")


@dashboard_bp.route("/event_registrations", methods=["GET"])
@admin_required
def list_event_registrations():
    return render_listing("event_registrations", "Event Registrations")
