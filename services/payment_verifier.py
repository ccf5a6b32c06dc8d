import time

from services.errors import PaymentNotCompleted
from services.notifier import send_confirmation
from services.sessions import is_paid, session_email, session_metadata
from utils.audit import log_event
from utils.booking_codec import decode_bookings

CONFIRMATION_PREFIX = "WM-"


def generate_confirmation_number(now_ms=None) -> str:
    """WM- plus the last 8 digits of the epoch milliseconds."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{CONFIRMATION_PREFIX}{str(int(now_ms))[-8:]}"


def verify_payment(processor, mailer, session_id: str) -> dict:
    session = processor.retrieve_session(session_id)

    if not is_paid(session):
        log_event(
            "PAYMENT_NOT_COMPLETED",
            entity="checkout_session",
            entity_id=session_id,
            metadata={"payment_status": session.get("payment_status")},
        )
        raise PaymentNotCompleted()

    meta = session_metadata(session)
    bookings = decode_bookings(meta)
    confirmation_number = generate_confirmation_number()
    customer_email = session_email(session)

    # Best-effort: the customer sees success even if this fails
    send_confirmation(
        mailer,
        to=customer_email,
        customer_name=meta.get("customerName"),
        company=meta.get("company"),
        product=meta.get("product"),
        bookings=bookings,
        confirmation_number=confirmation_number,
        total_paid=f"{(session.get('amount_total') or 0) / 100:.2f}",
    )

    log_event(
        "PAYMENT_VERIFIED",
        entity="checkout_session",
        entity_id=session_id,
        metadata={"confirmation_number": confirmation_number, "slots": len(bookings)},
    )
    return {
        "confirmationNumber": confirmation_number,
        "bookings": [b.to_dict() for b in bookings],
        "customerEmail": customer_email,
    }
