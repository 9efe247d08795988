from flask import Blueprint, current_app, jsonify, render_template

from ella_rises.extensions import db
from ella_rises.services import CalendarService, RegistrationService
from ella_rises.session_context import get_session_context
from ella_rises.utils.auth import login_required_json
from ella_rises.utils.clock import today_local

calendar_bp = Blueprint("calendar", __name__)


@calendar_bp.route("/calendar", methods=["GET"])
def view_calendar():
    context = get_session_context()
    try:
        calendar_data = CalendarService.build_calendar(today_local(), context.user_id)
    except Exception as e:
        current_app.logger.error(f"Error loading calendar: {str(e)}")
        db.session.rollback()
        return f"Error loading calendar: {str(e)}", 500

    message, message_type = context.pop_flash()
    return render_template(
        "calendar.html",
        calendar=calendar_data,
        message=message,
        message_type=message_type,
    )


@calendar_bp.route("/register-event/<int:event_id>", methods=["POST"])
@login_required_json
def register_event(event_id):
    context = get_session_context()
    try:
        body, status = RegistrationService.register_for_event(event_id, context.user_id)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(
            f"Failed to register user {context.user_id} for event {event_id}: {str(e)}"
        )
        return jsonify({"success": False, "error": "Registration failed. Please try again."}), 500
    return jsonify(body), status


@calendar_bp.route("/cancel-registration/<int:event_id>", methods=["POST"])
@login_required_json
def cancel_registration(event_id):
    context = get_session_context()
    try:
        body, status = RegistrationService.cancel_registration(event_id, context.user_id)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(
            f"Failed to cancel registration of user {context.user_id} for event {event_id}: {str(e)}"
        )
        return jsonify({"success": False, "error": "Cancellation failed. Please try again."}), 500
    return jsonify(body), status
