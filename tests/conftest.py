"""
Shared fixtures: an in-memory stand-in for Stripe checkout sessions and a
mailer that records what it was asked to send.
"""
from __future__ import annotations

import itertools
import time

import pytest

from app import create_app
from config import Config
from services.processor import ProcessorError
from utils.booking_codec import encode_bookings

ADMIN_PASSWORD = "letmein"


class TestConfig(Config):
    TESTING = True
    ADMIN_PASSWORD = ADMIN_PASSWORD
    FRONTEND_URL = "https://demos.example.com"
    STRIPE_SECRET_KEY = "sk_test_dummy"
    RESEND_API_KEY = None


class FakeProcessor:
    def __init__(self):
        self.sessions: dict[str, dict] = {}
        self.created: list[dict] = []
        self.refunds: list[dict] = []
        self.list_calls: list[dict] = []
        self.fail_with: ProcessorError | None = None
        self._ids = itertools.count(1)

    def add_session(self, cart=None, *, email="ana@example.com", name="Ana", company="Acme Foods",
                    product="Oat Bars", phone="555-0100", payment_status="paid", created=None,
                    refunded=False, payment_intent="auto", amount_total=None, metadata=None):
        n = next(self._ids)
        cart = cart if cart is not None else []
        meta = metadata if metadata is not None else {
            "customerName": name,
            "company": company,
            "product": product,
            "phone": phone,
            **encode_bookings(cart),
        }
        if payment_intent == "auto":
            payment_intent = {
                "id": f"pi_{n}",
                "latest_charge": {"id": f"ch_{n}", "refunded": refunded,
                                  "amount_refunded": (amount_total or len(cart) * 3000) if refunded else 0},
            }
        session = {
            "id": f"cs_test_{n}",
            "url": f"https://checkout.stripe.test/cs_test_{n}",
            "payment_status": payment_status,
            "customer_email": email,
            "amount_total": amount_total if amount_total is not None else len(cart) * 3000,
            "created": created if created is not None else int(time.time()),
            "metadata": meta,
            "payment_intent": payment_intent,
        }
        self.sessions[session["id"]] = session
        return session

    def _maybe_fail(self):
        if self.fail_with:
            raise self.fail_with

    def create_session(self, **params):
        self._maybe_fail()
        self.created.append(params)
        line_items = params["line_items"]
        session = self.add_session(
            metadata=params["metadata"],
            email=params.get("customer_email"),
            payment_status="unpaid",
            amount_total=sum(i["price_data"]["unit_amount"] * i["quantity"] for i in line_items),
        )
        return session

    def retrieve_session(self, session_id, expand_charge=False):
        self._maybe_fail()
        if session_id not in self.sessions:
            raise ProcessorError(f"No such checkout.session: '{session_id}'", type="InvalidRequestError")
        return self.sessions[session_id]

    def list_sessions(self, limit=100, starting_after=None, created_gte=None):
        self._maybe_fail()
        self.list_calls.append({"limit": limit, "starting_after": starting_after, "created_gte": created_gte})
        rows = sorted(self.sessions.values(), key=lambda s: (s["created"], s["id"]), reverse=True)
        if created_gte is not None:
            rows = [s for s in rows if s["created"] >= created_gte]
        if starting_after:
            ids = [s["id"] for s in rows]
            rows = rows[ids.index(starting_after) + 1:]
        return {"data": rows[:limit], "has_more": len(rows) > limit}

    def create_refund(self, payment_intent):
        self._maybe_fail()
        session = next(s for s in self.sessions.values()
                       if isinstance(s["payment_intent"], dict) and s["payment_intent"]["id"] == payment_intent)
        charge = session["payment_intent"]["latest_charge"]
        charge["refunded"] = True
        charge["amount_refunded"] = session["amount_total"]
        refund = {"id": f"re_{len(self.refunds) + 1}", "amount": session["amount_total"],
                  "payment_intent": payment_intent}
        self.refunds.append(refund)
        return refund


class FakeMailer:
    def __init__(self, ok=True, error=None, raises=None):
        self.sent: list[dict] = []
        self.ok = ok
        self.error = error
        self.raises = raises

    def send(self, to_email, subject, html, attachments=None):
        if self.raises:
            raise self.raises
        self.sent.append({"to": to_email, "subject": subject, "html": html, "attachments": attachments})
        return self.ok, self.error


@pytest.fixture
def processor():
    return FakeProcessor()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def app(processor, mailer):
    return create_app(TestConfig, processor=processor, mailer=mailer)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"x-admin-password": ADMIN_PASSWORD}


def make_slot(date="2026-03-14", time="11:00 AM", location="Santa Cruz", display_date=None):
    return {
        "date": date,
        "time": time,
        "location": location,
        "displayDate": display_date or f"Sat, {date}",
    }
