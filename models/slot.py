# models/slot.py

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, order=True)
class Slot:
    """A generated bookable window. Never persisted, recomputed on demand."""

    start: datetime
    end: datetime

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def __str__(self):
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"


@dataclass
class SlotAvailability:
    slot: Slot
    booked: int
    capacity: int
    is_past: bool

    @property
    def is_full(self) -> bool:
        return self.booked >= self.capacity

    @property
    def remaining(self) -> int:
        return max(0, self.capacity - self.booked)

    @property
    def is_selectable(self) -> bool:
        return not (self.is_full or self.is_past)

    def __str__(self):
        return f"{self.slot} ({self.booked}/{self.capacity} booked)"
