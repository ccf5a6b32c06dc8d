from flask import Blueprint, current_app, jsonify, request

from services.checkout import create_checkout, parse_cart
from services.payment_verifier import verify_payment
from services.processor import get_processor
from utils.emailer import get_mailer

checkout_bp = Blueprint("checkout", __name__, url_prefix="/api")


@checkout_bp.post("/create-checkout-session")
def create_checkout_session():
    data = request.get_json(silent=True) or {}
    cart = parse_cart(data.get("cart"))

    result = create_checkout(
        get_processor(),
        cart,
        customer_email=data.get("customerEmail"),
        customer_name=data.get("customerName"),
        company=data.get("company"),
        product=data.get("product"),
        phone=data.get("phone"),
        frontend_url=current_app.config.get("FRONTEND_URL"),
    )
    return jsonify(result), 200


@checkout_bp.get("/verify-payment/<session_id>")
def verify_payment_route(session_id: str):
    result = verify_payment(get_processor(), get_mailer(), session_id)
    return jsonify(success=True, **result), 200
