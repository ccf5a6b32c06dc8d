from flask import Blueprint, jsonify, request

from security.admin_auth import check_admin_password, require_admin_password
from services.analytics import full_analytics, list_bookings, month_stats
from services.processor import get_processor
from services.refunds import refund_booking
from utils.audit import log_event
from utils.emailer import get_mailer

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.post("/auth")
def admin_auth():
    data = request.get_json(silent=True) or {}
    failure = check_admin_password(data.get("password"))
    if failure:
        return failure
    log_event("ADMIN_LOGIN", entity="admin")
    return jsonify(success=True), 200


@admin_bp.get("/bookings")
@require_admin_password
def admin_bookings():
    rows = list_bookings(get_processor())
    log_event("ADMIN_BOOKINGS_VIEW", entity="admin", metadata={"count": len(rows)})
    return jsonify(bookings=[r.to_dict() for r in rows]), 200


@admin_bp.get("/stats")
@require_admin_password
def admin_stats():
    stats = month_stats(get_processor())
    log_event("ADMIN_STATS_VIEW", entity="admin")
    return jsonify(stats), 200


@admin_bp.get("/analytics")
@require_admin_password
def admin_analytics():
    payload = full_analytics(get_processor())
    log_event("ADMIN_ANALYTICS_VIEW", entity="admin")
    return jsonify(payload), 200


@admin_bp.post("/bookings/<session_id>/refund")
@require_admin_password
def admin_refund(session_id: str):
    result = refund_booking(get_processor(), get_mailer(), session_id)
    return jsonify(result), 200
