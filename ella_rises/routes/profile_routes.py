from flask import Blueprint, current_app, jsonify, redirect, render_template, request, url_for

from ella_rises.exceptions import (
    MissingFieldsError,
    NotFoundError,
    UnauthorizedError,
    UnknownFieldsError,
    UnknownTableError,
)
from ella_rises.extensions import db
from ella_rises.services import CrudService, UserService
from ella_rises.services.entity_registry import Entity
from ella_rises.session_context import get_session_context
from ella_rises.utils.auth import login_required, login_required_json

profile_bp = Blueprint("profile", __name__)


def check_owner(context, table, record_id):
    """Participants may only touch rows that belong to them; admins may touch any."""
    owner_id = CrudService.owner_id(table, record_id)
    if owner_id is None:
        raise NotFoundError(f"No {table} row with id {record_id}")
    if not context.is_admin and owner_id != context.user_id:
        raise UnauthorizedError("You can only change your own records")
    return owner_id


@profile_bp.route("/profile", methods=["GET"])
@login_required
def my_profile():
    return redirect(url_for("profile.view_profile", user_id=get_session_context().user_id))


@profile_bp.route("/profile/<int:user_id>", methods=["GET"])
@login_required
def view_profile(user_id):
    context = get_session_context()
    if not context.is_admin and user_id != context.user_id:
        return "Access denied", 403

    profile = UserService.get_profile(user_id)
    if not profile:
        return "User not found", 404

    message, message_type = context.pop_flash()
    return render_template(
        "profile.html", profile=profile, message=message, message_type=message_type
    )


@profile_bp.route("/profile-edit/<table>/<int:record_id>", methods=["GET"])
@login_required
def profile_edit_form(table, record_id):
    context = get_session_context()
    try:
        spec = CrudService.resolve(table)
        check_owner(context, spec.table, record_id)
        info = CrudService.get(table, record_id)
    except (UnknownTableError, NotFoundError) as e:
        return str(e), 404
    except UnauthorizedError as e:
        return str(e), 403

    return render_template(
        "form.html",
        mode="edit",
        spec=spec,
        table_name=spec.table,
        info=info,
        action=f"/profile-edit/{spec.table}/{record_id}",
        id=record_id,
        pass_id=None,
        **CrudService.form_options(spec),
    )


@profile_bp.route("/profile-edit/<table>/<int:record_id>", methods=["POST"])
@login_required
def profile_edit(table, record_id):
    context = get_session_context()
    try:
        spec = CrudService.resolve(table)
        owner_id = check_owner(context, spec.table, record_id)
    except (UnknownTableError, NotFoundError) as e:
        return str(e), 404
    except UnauthorizedError as e:
        return str(e), 403

    try:
        if not context.is_admin:
            CrudService.check_participant_edit(
                table, record_id, request.form, context.user_id
            )
        CrudService.update(table, record_id, request.form)
        context.flash("Updated Successfully!")
    except UnauthorizedError as e:
        return str(e), 403
    except (MissingFieldsError, UnknownFieldsError, ValueError) as e:
        context.flash(f"Error updating record: {str(e)}", "danger")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating {table} record {record_id}: {str(e)}")
        context.flash(f"Error updating record: {str(e)}", "danger")
    return redirect(url_for("profile.view_profile", user_id=owner_id))


@profile_bp.route("/profile-delete/<table>/<int:record_id>", methods=["POST"])
@login_required_json
def profile_delete(table, record_id):
    context = get_session_context()
    try:
        spec = CrudService.resolve(table)
        check_owner(context, spec.table, record_id)
        CrudService.delete(table, record_id)
    except (UnknownTableError, NotFoundError) as e:
        return jsonify({"success": False, "error": str(e)}), 404
    except UnauthorizedError as e:
        return jsonify({"success": False, "error": str(e)}), 403
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting {table} record {record_id}: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500

    # Deleting your own account ends the session
    if spec.entity == Entity.USERS and record_id == context.user_id:
        context.log_out()
        current_app.logger.info(f"User {record_id} deleted their account")
        return jsonify({"success": True, "redirect": "/"})
    return jsonify({"success": True})
