# models/booking.py

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class BookingStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class Booking:
    id: str
    user_id: str
    facility_id: str
    starts_at: datetime
    ends_at: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    people_count: int = 1
    note: Optional[str] = None
    amount: Optional[float] = None

    def __post_init__(self):
        if self.people_count <= 0:
            raise ValueError("Booking people count must be positive")
        if self.ends_at <= self.starts_at:
            raise ValueError("Booking must end after it starts")

    @property
    def duration_minutes(self) -> int:
        return round((self.ends_at - self.starts_at).total_seconds() / 60)

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    def __str__(self):
        return (
            f"Booking {self.id}: {self.starts_at.strftime('%Y-%m-%d %H:%M')} - "
            f"{self.ends_at.strftime('%H:%M')} x{self.people_count} [{self.status.value}]"
        )
