from flask import Blueprint, current_app, jsonify, redirect, render_template, request

from ella_rises.exceptions import (
    MissingFieldsError,
    NotFoundError,
    UnknownFieldsError,
    UnknownTableError,
)
from ella_rises.extensions import db
from ella_rises.services import CrudService
from ella_rises.session_context import get_session_context
from ella_rises.utils.auth import admin_required

crud_bp = Blueprint("crud", __name__)

INPUT_ERRORS = (MissingFieldsError, UnknownFieldsError, ValueError)


def render_form(spec, mode, info, action, record_id=None, pass_id=None):
    return render_template(
        "form.html",
        mode=mode,
        spec=spec,
        table_name=spec.table,
        info=info,
        action=action,
        id=record_id,
        pass_id=pass_id,
        **CrudService.form_options(spec),
    )


@crud_bp.route("/add/<table>", methods=["GET"])
@crud_bp.route("/add/<table>/<int:pass_id>", methods=["GET"])
@admin_required
def add_form(table, pass_id=None):
    try:
        spec = CrudService.resolve(table)
    except UnknownTableError as e:
        return str(e), 404
    info = {"user_id": pass_id} if pass_id else {}
    return render_form(spec, "add", info, f"/add/{spec.table}", pass_id=pass_id)


@crud_bp.route("/add/<table>", methods=["POST"])
@admin_required
def add_record(table):
    context = get_session_context()
    try:
        spec = CrudService.resolve(table)
    except UnknownTableError as e:
        return str(e), 404

    try:
        CrudService.add(table, request.form)
        context.flash("Added Successfully!")
    except INPUT_ERRORS as e:
        context.flash(f"Error adding record: {str(e)}", "danger")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding {table} record: {str(e)}")
        context.flash(f"Error adding record: {str(e)}", "danger")
    return redirect(spec.list_route)


@crud_bp.route("/edit/<table>/<int:record_id>", methods=["GET"])
@admin_required
def edit_form(table, record_id):
    try:
        spec = CrudService.resolve(table)
        info = CrudService.get(table, record_id)
    except (UnknownTableError, NotFoundError) as e:
        return str(e), 404
    return render_form(spec, "edit", info, f"/edit/{spec.table}/{record_id}", record_id)


@crud_bp.route("/edit/<table>/<int:record_id>", methods=["POST"])
@admin_required
def edit_record(table, record_id):
    context = get_session_context()
    try:
        spec = CrudService.resolve(table)
    except UnknownTableError as e:
        return str(e), 404

    try:
        CrudService.update(table, record_id, request.form)
        context.flash("Updated Successfully!")
    except NotFoundError as e:
        return str(e), 404
    except INPUT_ERRORS as e:
        context.flash(f"Error updating record: {str(e)}", "danger")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating {table} record {record_id}: {str(e)}")
        context.flash(f"Error updating record: {str(e)}", "danger")
    return redirect(spec.list_route)


@crud_bp.route("/delete/<table>/<int:record_id>", methods=["POST"])
@admin_required
def delete_record(table, record_id):
    try:
        CrudService.delete(table, record_id)
        return jsonify({"success": True})
    except (UnknownTableError, NotFoundError) as e:
        return jsonify({"success": False, "error": str(e)}), 404
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting {table} record {record_id}: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 500
