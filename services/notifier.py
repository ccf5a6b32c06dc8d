"""
Confirmation and cancellation emails.

Both senders are best-effort: payment is the source of truth, so a failure to
render or deliver an email is logged and reported as ``False``, never raised.
"""
import base64
import logging

from flask import render_template

from models.slot import DemoSlot
from utils.audit import log_event
from utils.calendar_export import render_calendar

logger = logging.getLogger(__name__)

ICS_FILENAME = "woodlands-demo.ics"


def _slots(bookings):
    return [DemoSlot.coerce(b) for b in bookings]


def render_confirmation_html(customer_name, company, product, bookings, confirmation_number, total_paid) -> str:
    return render_template(
        "emails/confirmation.html",
        customer_name=customer_name,
        company=company,
        product=product,
        bookings=_slots(bookings),
        confirmation_number=confirmation_number,
        total_paid=total_paid,
    )


def render_cancellation_html(customer_name, company, product, bookings, refund_amount) -> str:
    return render_template(
        "emails/cancellation.html",
        customer_name=customer_name,
        company=company,
        product=product,
        bookings=_slots(bookings),
        refund_amount=refund_amount,
    )


def calendar_attachment(bookings, company, product) -> dict:
    ics = render_calendar(_slots(bookings), company, product)
    return {
        "filename": ICS_FILENAME,
        "content": base64.b64encode(ics.encode("utf-8")).decode("ascii"),
    }


def _dispatch(mailer, action, to, subject, build):
    try:
        html, attachments = build()
        ok, error = mailer.send(to, subject, html, attachments=attachments)
    except Exception as exc:
        logger.exception("Error sending %s email to %s", action.lower(), to)
        ok, error = False, str(exc)
    else:
        if ok:
            logger.info("%s email sent to: %s", action.capitalize(), to)
        else:
            logger.error("Error sending %s email to %s: %s", action.lower(), to, error)
    log_event(f"{action}_EMAIL", entity="email", entity_id=to, metadata={"sent": ok, "error": error})
    return ok


def send_confirmation(mailer, to, customer_name, company, product, bookings, confirmation_number, total_paid) -> bool:
    def build():
        html = render_confirmation_html(
            customer_name, company, product, bookings, confirmation_number, total_paid
        )
        # Calendar file is optional; bad slot data only drops the attachment
        try:
            attachments = [calendar_attachment(bookings, company, product)]
        except ValueError as exc:
            logger.warning("Sending confirmation to %s without calendar file: %s", to, exc)
            attachments = None
        return html, attachments

    return _dispatch(mailer, "CONFIRMATION", to, f"Demo Confirmed - {confirmation_number}", build)


def send_cancellation(mailer, to, customer_name, company, product, bookings, refund_amount) -> bool:
    def build():
        html = render_cancellation_html(customer_name, company, product, bookings, refund_amount)
        return html, None

    return _dispatch(mailer, "CANCELLATION", to, "Demo Booking Cancelled", build)
