"""ICS (RFC 5545) export of booked demo slots."""
import re
from datetime import datetime, timedelta, timezone

from models.slot import DemoSlot

PRODID = "-//Woodlands Market//Demo Scheduling//EN"
UID_DOMAIN = "woodlandsmarket.com"
DEMO_DURATION_HOURS = 3

_TIME_LABEL = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp])\.?[Mm]\.?\s*$")


def parse_start_hour(label: str) -> int:
    """Hour of day for a 12-hour label such as "3:00 PM". Minutes are ignored."""
    match = _TIME_LABEL.match(label or "")
    if not match:
        raise ValueError(f"Unrecognised time label: {label!r}")

    hours = int(match.group(1))
    if not 1 <= hours <= 12:
        raise ValueError(f"Hour out of range in time label: {label!r}")

    is_pm = match.group(3).upper() == "P"
    if is_pm and hours != 12:
        hours += 12
    if not is_pm and hours == 12:
        hours = 0
    return hours


def escape_text(value) -> str:
    text = "" if value is None else str(value)
    text = text.replace("\\", "\\\\")
    text = text.replace(";", "\\;").replace(",", "\\,")
    text = text.replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n")
    return text


def slot_window(slot: DemoSlot):
    day = slot.calendar_date()
    start = datetime(day.year, day.month, day.day, parse_start_hour(slot.time))
    # timedelta carries a late start over midnight onto the next day
    return start, start + timedelta(hours=DEMO_DURATION_HOURS)


def _fmt_local(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%S")


def render_calendar(bookings, company, product, now=None) -> str:
    now = now or datetime.now(timezone.utc)
    stamp_ms = int(now.timestamp() * 1000)
    dtstamp = now.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]

    for index, item in enumerate(bookings):
        slot = DemoSlot.coerce(item)
        start, end = slot_window(slot)
        description = escape_text(f"Product: {product}\n3-hour product demonstration slot.")
        lines.extend([
            "BEGIN:VEVENT",
            f"UID:wm-demo-{stamp_ms}-{index}@{UID_DOMAIN}",
            f"DTSTAMP:{dtstamp}",
            f"DTSTART:{_fmt_local(start)}",
            f"DTEND:{_fmt_local(end)}",
            f"SUMMARY:{escape_text(f'Product Demo - {company}')}",
            f"LOCATION:{escape_text(f'Woodlands Market, {slot.location}, CA')}",
            f"DESCRIPTION:{description}",
            "STATUS:CONFIRMED",
            "END:VEVENT",
        ])

    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"
