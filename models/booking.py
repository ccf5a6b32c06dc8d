from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from models.slot import DemoSlot


@dataclass
class BookingRecord:
    """Admin-facing projection of a paid checkout session. Never stored."""

    session_id: str
    email: Optional[str]
    customer_name: Optional[str]
    company: Optional[str]
    product: Optional[str]
    phone: Optional[str]
    amount_total: int  # smallest unit (cents)
    created: int  # epoch seconds
    payment_intent_id: Optional[str] = None
    refunded: bool = False
    amount_refunded: int = 0
    bookings: List[DemoSlot] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "customerName": self.customer_name,
            "company": self.company,
            "product": self.product,
            "phone": self.phone,
            "email": self.email,
            "bookings": [b.to_dict() for b in self.bookings],
            "demoCount": len(self.bookings),
            "amount": self.amount_total / 100,
            "created": datetime.fromtimestamp(self.created).isoformat(),
            "paymentIntentId": self.payment_intent_id,
            "refunded": self.refunded,
            "amountRefunded": self.amount_refunded / 100,
        }
