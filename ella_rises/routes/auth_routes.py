from flask import Blueprint, current_app, redirect, render_template, request, url_for

from ella_rises.exceptions import MissingFieldsError, UnknownFieldsError
from ella_rises.extensions import db, limiter
from ella_rises.services import UserService
from ella_rises.session_context import SUPPORTED_LANGUAGES, get_session_context

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/", methods=["GET"])
def index():
    return render_template("index.html")


@auth_bp.route("/login", methods=["GET"])
def login():
    context = get_session_context()
    message, message_type = context.pop_flash()
    return render_template("login.html", message=message, message_type=message_type)


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login_submit():
    context = get_session_context()
    email = request.form.get("participant_email", "")
    try:
        user = UserService.sign_in(email, request.form.get("participant_password", ""))
    except ValueError as e:
        return (
            render_template("login.html", message=str(e), message_type="danger"),
            401,
        )

    context.log_in(user)
    context.flash(f"Welcome back, {user.participant_first_name}!")
    if user.is_admin:
        return redirect(url_for("dashboard.list_users"))
    return redirect(url_for("calendar.view_calendar"))


@auth_bp.route("/signup", methods=["GET"])
def signup():
    return render_template("signup.html", message="", message_type="success")


@auth_bp.route("/signup", methods=["POST"])
def signup_submit():
    context = get_session_context()
    try:
        user = UserService.sign_up(request.form)
    except MissingFieldsError as e:
        return (
            render_template(
                "signup.html",
                message="Missing required fields: " + ", ".join(e.fields),
                message_type="danger",
            ),
            400,
        )
    except (UnknownFieldsError, ValueError) as e:
        db.session.rollback()
        return render_template("signup.html", message=str(e), message_type="danger"), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Unexpected error during signup: {str(e)}")
        return (
            render_template(
                "signup.html",
                message="An error occurred during signup",
                message_type="danger",
            ),
            500,
        )

    context.log_in(user)
    context.flash("Account created!")
    return redirect(url_for("calendar.view_calendar"))


@auth_bp.route("/logout", methods=["GET", "POST"])
def logout():
    get_session_context().log_out()
    return redirect(url_for("auth.index"))


@auth_bp.route("/set-language", methods=["POST"])
def set_language():
    language = request.form.get("language", "en")
    if language not in SUPPORTED_LANGUAGES:
        return "Unsupported language", 400
    get_session_context().language = language
    return redirect(request.referrer or url_for("auth.index"))
