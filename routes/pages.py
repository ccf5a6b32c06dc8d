from flask import Blueprint, current_app, jsonify, render_template, request

pages_bp = Blueprint("pages", __name__)


@pages_bp.get("/health")
def health():
    return jsonify(status="ok"), 200


@pages_bp.get("/success")
def success_page():
    # Stripe redirects here; the page itself calls /api/verify-payment
    return render_template(
        "success.html",
        session_id=request.args.get("session_id", ""),
        home_url=current_app.config.get("FRONTEND_URL", "/"),
    ), 200
