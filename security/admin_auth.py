from functools import wraps

from flask import current_app, jsonify, request

from utils.audit import log_event

ADMIN_HEADER = "x-admin-password"
ADMIN_QUERY_PARAM = "password"


def check_admin_password(candidate):
    """
    Returns None when the password matches, else an error response tuple.
    A missing ADMIN_PASSWORD is a server misconfiguration, never a bypass.
    """
    expected = current_app.config.get("ADMIN_PASSWORD")
    if not expected:
        return jsonify(error="Admin password not configured"), 500

    # Plain equality; see DESIGN.md on timing-safe comparison
    if not candidate or candidate != expected:
        log_event("ADMIN_AUTH_FAILED", entity="admin")
        return jsonify(error="Unauthorized"), 401
    return None


def require_admin_password(fn):
    """
    Usage: @require_admin_password
    Reads the x-admin-password header, falling back to ?password=.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        candidate = request.headers.get(ADMIN_HEADER) or request.args.get(ADMIN_QUERY_PARAM)
        failure = check_admin_password(candidate)
        if failure:
            return failure
        return fn(*args, **kwargs)
    return wrapper
