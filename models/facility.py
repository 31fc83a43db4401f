# models/facility.py

from dataclasses import dataclass
from typing import Optional

DEFAULT_SLOT_MINS = 60
DEFAULT_CAPACITY = 10


@dataclass
class Facility:
    id: str
    name: str
    operating_hours: Optional[str] = None  # "HH:MM-HH:MM"
    slot_mins: int = DEFAULT_SLOT_MINS
    capacity: int = DEFAULT_CAPACITY
    facility_type: Optional[str] = None

    def __post_init__(self):
        if self.slot_mins <= 0:
            raise ValueError("Facility slot duration must be positive")
        if self.capacity <= 0:
            raise ValueError("Facility capacity must be positive")

    def __str__(self):
        hours = self.operating_hours or "no hours"
        return f"{self.name} ({hours}, {self.slot_mins}m slots, capacity {self.capacity})"
