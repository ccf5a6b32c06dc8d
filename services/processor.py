"""
Payment processor access.

Stripe Checkout Sessions are the system of record for bookings. Everything
else talks to them through this narrow interface so tests can swap in an
in-memory double via ``app.extensions["payment_processor"]``.
"""
import logging

import stripe
from flask import current_app

logger = logging.getLogger(__name__)

SESSION_PAGE_SIZE = 100
CHARGE_EXPAND = "payment_intent.latest_charge"


class ProcessorError(Exception):
    def __init__(self, message, type="unknown"):
        super().__init__(message)
        self.message = message
        self.type = type


def to_plain(value):
    # StripeObject stopped subclassing dict in stripe 15
    if isinstance(value, stripe.StripeObject):
        value = value.to_dict_recursive() if hasattr(value, "to_dict_recursive") else value.to_dict()
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    return value


class StripeProcessor:
    """Stripe-backed processor. Every return value is converted to plain dicts and lists."""

    def __init__(self, api_key=None, timeout=30):
        self.api_key = api_key
        # Installed once per process; later apps reuse the first client
        if getattr(stripe, "default_http_client", None) is None:
            stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    def _call(self, fn, *args, **kwargs):
        if not self.api_key:
            raise ProcessorError(
                "Stripe secret key missing (STRIPE_SECRET_KEY)", type="configuration_error"
            )
        try:
            return to_plain(fn(*args, api_key=self.api_key, **kwargs))
        except stripe.StripeError as exc:
            message = getattr(exc, "user_message", None) or str(exc)
            logger.error("Stripe request failed: %s %s", type(exc).__name__, message)
            raise ProcessorError(message, type=type(exc).__name__) from exc

    def create_session(self, **params):
        return self._call(stripe.checkout.Session.create, **params)

    def retrieve_session(self, session_id: str, expand_charge: bool = False):
        expand = [CHARGE_EXPAND] if expand_charge else []
        return self._call(stripe.checkout.Session.retrieve, session_id, expand=expand)

    def list_sessions(self, limit=SESSION_PAGE_SIZE, starting_after=None, created_gte=None):
        """One page of sessions, newest first: ``{"data": [...], "has_more": bool}``."""
        params = {"limit": limit, "expand": [f"data.{CHARGE_EXPAND}"]}
        if starting_after:
            params["starting_after"] = starting_after
        if created_gte is not None:
            params["created"] = {"gte": int(created_gte)}
        page = self._call(stripe.checkout.Session.list, **params)
        return {"data": list(page["data"]), "has_more": bool(page["has_more"])}

    def create_refund(self, payment_intent: str):
        return self._call(stripe.Refund.create, payment_intent=payment_intent)


def get_processor():
    return current_app.extensions["payment_processor"]


def iter_sessions(processor, max_sessions=None, created_gte=None, page_size=SESSION_PAGE_SIZE):
    """Walk the cursor-paginated session list one page at a time."""
    fetched = 0
    cursor = None
    while True:
        limit = page_size
        if max_sessions is not None:
            limit = min(page_size, max_sessions - fetched)
            if limit <= 0:
                return

        page = processor.list_sessions(limit=limit, starting_after=cursor, created_gte=created_gte)
        data = page["data"]
        for session in data:
            yield session
        fetched += len(data)

        if not data or not page["has_more"]:
            return
        cursor = data[-1]["id"]
