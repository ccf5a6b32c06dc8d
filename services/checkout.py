from models.slot import DemoSlot
from services.errors import InvalidCart
from services.pricing import CURRENCY, DEMO_FEE_CENTS, cart_total_cents
from utils.audit import log_event
from utils.booking_codec import encode_bookings


def parse_cart(raw_cart) -> list:
    if not isinstance(raw_cart, list) or not raw_cart:
        raise InvalidCart()
    try:
        return [DemoSlot.from_dict(item) for item in raw_cart]
    except TypeError:
        raise InvalidCart()


def build_line_items(cart) -> list:
    # One line item per slot, never aggregated, even for duplicates
    return [
        {
            "price_data": {
                "currency": CURRENCY,
                "product_data": {
                    "name": f"Demo at Woodlands Market - {slot.location}",
                    "description": f"{slot.display_date} • {slot.time}",
                },
                "unit_amount": DEMO_FEE_CENTS,
            },
            "quantity": 1,
        }
        for slot in cart
    ]


def build_metadata(cart, customer_name, company, product, phone) -> dict:
    meta = {
        "customerName": customer_name or "",
        "company": company or "",
        "product": product or "",
        "phone": phone or "",
    }
    meta.update(encode_bookings(cart))
    return meta


def create_checkout(processor, cart, customer_email, customer_name, company, product, phone, frontend_url):
    """Open a hosted Stripe Checkout session for the cart. Returns sessionId and url."""
    slots = [DemoSlot.coerce(item) for item in cart]
    base_url = (frontend_url or "").rstrip("/")

    session = processor.create_session(
        payment_method_types=["card"],
        line_items=build_line_items(slots),
        mode="payment",
        success_url=f"{base_url}/success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{base_url}/",
        customer_email=customer_email,
        metadata=build_metadata(slots, customer_name, company, product, phone),
    )

    log_event(
        "CHECKOUT_SESSION_CREATED",
        entity="checkout_session",
        entity_id=session["id"],
        metadata={"slots": len(slots), "amount": cart_total_cents(len(slots))},
    )
    return {"sessionId": session["id"], "url": session["url"]}
