"""Read helpers over checkout session objects (Stripe objects or plain dicts)."""
from models.booking import BookingRecord
from utils.booking_codec import decode_bookings


def normalize_email(value) -> str:
    return (value or "").strip().lower()


def session_email(session):
    details = session.get("customer_details") or {}
    return session.get("customer_email") or details.get("email")


def session_metadata(session) -> dict:
    return dict(session.get("metadata") or {})


def is_paid(session) -> bool:
    return session.get("payment_status") == "paid"


def payment_intent_id(session):
    intent = session.get("payment_intent")
    if not intent:
        return None
    if isinstance(intent, str):
        return intent
    return intent.get("id")


def latest_charge(session):
    """The expanded charge, or None when payment_intent was not expanded."""
    intent = session.get("payment_intent")
    if not intent or isinstance(intent, str):
        return None
    charge = intent.get("latest_charge")
    if not charge or isinstance(charge, str):
        return None
    return charge


def is_refunded(session) -> bool:
    charge = latest_charge(session)
    return bool(charge and charge.get("refunded"))


def has_booking_identity(session) -> bool:
    return bool(session_metadata(session).get("customerName"))


def to_booking_record(session) -> BookingRecord:
    meta = session_metadata(session)
    charge = latest_charge(session) or {}
    return BookingRecord(
        session_id=session["id"],
        email=session_email(session),
        customer_name=meta.get("customerName"),
        company=meta.get("company"),
        product=meta.get("product"),
        phone=meta.get("phone"),
        amount_total=session.get("amount_total") or 0,
        created=session.get("created") or 0,
        payment_intent_id=payment_intent_id(session),
        refunded=bool(charge.get("refunded")),
        amount_refunded=charge.get("amount_refunded") or 0,
        bookings=decode_bookings(meta),
    )
