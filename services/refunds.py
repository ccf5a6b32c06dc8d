from services.errors import AlreadyRefunded, NoPaymentIntent, PaymentNotCompleted
from services.notifier import send_cancellation
from services.sessions import (
    is_paid,
    is_refunded,
    payment_intent_id,
    session_email,
    session_metadata,
)
from utils.audit import log_event
from utils.booking_codec import decode_bookings


def refund_booking(processor, mailer, session_id: str) -> dict:
    """Full refund of a paid booking, followed by a best-effort cancellation email."""
    session = processor.retrieve_session(session_id, expand_charge=True)

    if not is_paid(session):
        raise PaymentNotCompleted()

    intent_id = payment_intent_id(session)
    if not intent_id:
        raise NoPaymentIntent()

    if is_refunded(session):
        log_event("REFUND_REJECTED_ALREADY_REFUNDED", entity="checkout_session", entity_id=session_id)
        raise AlreadyRefunded()

    refund = processor.create_refund(payment_intent=intent_id)
    amount = (refund.get("amount") or 0) / 100

    meta = session_metadata(session)
    send_cancellation(
        mailer,
        to=session_email(session),
        customer_name=meta.get("customerName"),
        company=meta.get("company"),
        product=meta.get("product"),
        bookings=decode_bookings(meta),
        refund_amount=f"{amount:.2f}",
    )

    log_event(
        "REFUND_ISSUED",
        entity="checkout_session",
        entity_id=session_id,
        metadata={"refund_id": refund["id"], "payment_intent": intent_id, "amount": amount},
    )
    return {"success": True, "refundId": refund["id"], "amount": amount}
