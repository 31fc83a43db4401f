# models/decision.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models.booking import Booking
from models.slot import Slot


class BookingError(Enum):
    SELECTION = "selection"
    INVALID_SLOT = "invalid_slot"
    PAST_SLOT = "past_slot"
    DAILY_LIMIT = "daily_limit"
    SLOT_FULL = "slot_full"
    NOT_OWNER = "not_owner"
    NOT_CANCELLABLE = "not_cancellable"
    BACKEND = "backend"


@dataclass
class BookingDecision:
    """Outcome of a booking or cancellation gate. Advisory only."""

    allowed: bool
    error: Optional[BookingError] = None
    message: str = ""
    slot: Optional[Slot] = None
    people_count: Optional[int] = None
    remaining_minutes: Optional[int] = None
    booking: Optional[Booking] = None

    @classmethod
    def reject(cls, error: BookingError, message: str, **kwargs) -> "BookingDecision":
        return cls(allowed=False, error=error, message=message, **kwargs)

    def __bool__(self):
        return self.allowed
