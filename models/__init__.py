from .slot import DemoSlot
from .booking import BookingRecord
