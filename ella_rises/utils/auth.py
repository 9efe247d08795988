from functools import wraps

from flask import jsonify, redirect, url_for

from ella_rises.session_context import get_session_context


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not get_session_context().is_logged_in:
            return redirect(url_for("auth.login"))
        return view(*args, **kwargs)

    return wrapped


def login_required_json(view):
    """Variant for AJAX endpoints that answer with JSON instead of a redirect."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if not get_session_context().is_logged_in:
            return jsonify({"success": False, "error": "Please log in first"}), 401
        return view(*args, **kwargs)

    return wrapped


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        context = get_session_context()
        if not context.is_logged_in:
            return redirect(url_for("auth.login"))
        if not context.is_admin:
            return "Access denied: administrators only", 403
        return view(*args, **kwargs)

    return wrapped
