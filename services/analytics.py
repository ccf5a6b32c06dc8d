"""
Admin views derived from checkout sessions.

Nothing here is cached or stored: every call re-reads Stripe and folds the
paid sessions into the requested aggregate.
"""
from datetime import datetime

from services.pricing import DEMO_FEE, GRASSROOTS_PER_DEMO, MARKET_PER_DEMO, revenue_split
from services.processor import iter_sessions
from services.sessions import (
    has_booking_identity,
    is_paid,
    is_refunded,
    normalize_email,
    session_email,
    session_metadata,
    to_booking_record,
)
from utils.booking_codec import decode_bookings

RECENT_BOOKINGS_LIMIT = 100
ANALYTICS_SESSION_LIMIT = 300
TRAILING_MONTHS = 6
CANONICAL_TIME_SLOTS = ("11:00 AM", "3:00 PM")
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _paid_bookings(sessions):
    return [s for s in sessions if is_paid(s) and has_booking_identity(s)]


def list_bookings(processor) -> list:
    page = processor.list_sessions(limit=RECENT_BOOKINGS_LIMIT)
    return [to_booking_record(s) for s in _paid_bookings(page["data"])]


def month_start(now=None) -> datetime:
    now = now or datetime.now()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def month_stats(processor, now=None) -> dict:
    """This month's demo count and revenue split.

    Only paid, unrefunded sessions count. A refunded session's money went back
    to the customer, so it adds neither demos nor revenue.
    """
    since = month_start(now)
    sessions = iter_sessions(processor, created_gte=since.timestamp())

    demos = 0
    for session in _paid_bookings(sessions):
        if is_refunded(session):
            continue
        demos += len(decode_bookings(session_metadata(session)))

    split = revenue_split(demos)
    return {
        "thisMonthDemos": demos,
        "totalRevenue": split["revenue"],
        "marketShare": split["marketShare"],
        "grassrootsShare": split["grassrootsShare"],
        "demoFee": DEMO_FEE,
        "marketPerDemo": MARKET_PER_DEMO,
        "grassrootsPerDemo": GRASSROOTS_PER_DEMO,
    }


def month_key(value: datetime) -> str:
    return value.strftime("%Y-%m")


def trailing_months(now=None, count=TRAILING_MONTHS) -> list:
    """``count`` month starts ending with the current month, oldest first."""
    start = month_start(now)
    months = []
    year, month = start.year, start.month
    for _ in range(count):
        months.append(datetime(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def _empty_month(value: datetime) -> dict:
    row = {"label": value.strftime("%b %Y"), "demos": 0}
    row.update(revenue_split(0))
    return row


class AnalyticsBuilder:
    """Folds paid sessions into the admin analytics payload."""

    def __init__(self, now=None):
        self.monthly = {month_key(m): _empty_month(m) for m in trailing_months(now)}
        self.locations = {}
        self.time_slots = {label: 0 for label in CANONICAL_TIME_SLOTS}
        self.popular_days = {day: 0 for day in WEEKDAYS}
        self.customers = {}

    def add(self, session):
        meta = session_metadata(session)
        slots = decode_bookings(meta)
        created = session.get("created") or 0
        refunded = is_refunded(session)

        self._add_customer(session, meta, slots, created, refunded)
        if refunded:
            return

        key = month_key(datetime.fromtimestamp(created))
        if key in self.monthly:
            month = self.monthly[key]
            month["demos"] += len(slots)
            month.update(revenue_split(month["demos"]))

        for slot in slots:
            loc = self.locations.setdefault(slot.location, {"demos": 0, "revenue": 0})
            loc["demos"] += 1
            loc["revenue"] = loc["demos"] * DEMO_FEE

            self.time_slots[slot.time] = self.time_slots.get(slot.time, 0) + 1

            try:
                weekday = slot.calendar_date().weekday()
            except ValueError:
                continue
            self.popular_days[WEEKDAYS[weekday]] += 1

    def _add_customer(self, session, meta, slots, created, refunded):
        email = normalize_email(session_email(session))
        if not email:
            return

        customer = self.customers.get(email)
        if customer is None:
            customer = self.customers[email] = {
                "email": email,
                "name": None,
                "company": None,
                "phone": None,
                "bookings": 0,
                "spentCents": 0,
                "products": set(),
                "first": created,
                "last": created,
            }

        customer["bookings"] += len(slots)
        if not refunded:
            customer["spentCents"] += session.get("amount_total") or 0
        if meta.get("product"):
            customer["products"].add(meta["product"])

        customer["first"] = min(customer["first"], created)
        if created >= customer["last"] or customer["name"] is None:
            customer["last"] = max(customer["last"], created)
            customer["name"] = meta.get("customerName")
            customer["company"] = meta.get("company")
            customer["phone"] = meta.get("phone")

    def _customer_rows(self) -> list:
        rows = [
            {
                "email": c["email"],
                "name": c["name"],
                "company": c["company"],
                "phone": c["phone"],
                "bookings": c["bookings"],
                "totalSpent": c["spentCents"] / 100,
                "products": sorted(c["products"]),
                "firstBooking": datetime.fromtimestamp(c["first"]).isoformat(),
                "lastBooking": datetime.fromtimestamp(c["last"]).isoformat(),
                "isRepeat": c["bookings"] > 1,
            }
            for c in self.customers.values()
        ]
        rows.sort(key=lambda r: (-r["totalSpent"], r["email"]))
        return rows

    def result(self) -> dict:
        customers = self._customer_rows()
        return {
            "monthly": self.monthly,
            "locations": self.locations,
            "timeSlots": self.time_slots,
            "popularDays": self.popular_days,
            "customers": customers,
            "totalCustomers": len(customers),
            "repeatCustomers": sum(1 for c in customers if c["isRepeat"]),
        }


def build_analytics(sessions, now=None) -> dict:
    builder = AnalyticsBuilder(now)
    for session in _paid_bookings(sessions):
        builder.add(session)
    return builder.result()


def full_analytics(processor, now=None) -> dict:
    sessions = iter_sessions(processor, max_sessions=ANALYTICS_SESSION_LIMIT)
    return build_analytics(sessions, now=now)
