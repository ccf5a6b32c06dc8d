from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DemoSlot:
    """One 3-hour in-store demo at a fixed date, time and location."""

    date: str
    time: str
    location: str
    display_date: str

    @classmethod
    def from_dict(cls, data) -> "DemoSlot":
        if not isinstance(data, dict):
            raise TypeError(f"slot must be an object, got {type(data).__name__}")
        # Older carts send "dateStr" instead of "date"
        raw_date = data.get("date") or data.get("dateStr") or ""
        return cls(
            date=str(raw_date),
            time=str(data.get("time") or ""),
            location=str(data.get("location") or ""),
            display_date=str(data.get("displayDate") or ""),
        )

    @classmethod
    def coerce(cls, value) -> "DemoSlot":
        return value if isinstance(value, cls) else cls.from_dict(value)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "displayDate": self.display_date,
        }

    def calendar_date(self) -> date:
        # Accepts "2026-03-14" as well as a full ISO timestamp
        return date.fromisoformat(self.date[:10])
