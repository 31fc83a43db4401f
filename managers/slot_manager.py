# managers/slot_manager.py


import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from models.booking import Booking, BookingStatus
from models.facility import Facility
from models.slot import Slot, SlotAvailability
from utils.time_utils import parse_calendar_date, parse_operating_hours

logger = logging.getLogger("slot_manager")

DAILY_QUOTA_MINUTES = 180


def generate_slots(facility: Optional[Facility], day: Union[date, str]) -> List[Slot]:
    """
    Tile a facility's operating window on the given day with fixed-length slots.

    Malformed or missing operating hours, an unparsable day, or a window whose
    start is not before its end all produce an empty list. A trailing slot
    that would run past closing time is dropped, not truncated.
    """
    if facility is None:
        return []

    calendar_day = parse_calendar_date(day)
    if calendar_day is None:
        logger.debug(f"Unparsable date {day!r}, no slots")
        return []

    hours = parse_operating_hours(facility.operating_hours)
    if hours is None:
        logger.debug(
            f"Facility {facility.id} has invalid operating hours "
            f"{facility.operating_hours!r}, no slots"
        )
        return []

    start = datetime.combine(calendar_day, hours[0])
    end = datetime.combine(calendar_day, hours[1])
    if not start < end:
        logger.debug(f"Facility {facility.id} opens after it closes, no slots")
        return []

    # Wall-clock tiling on naive local times; DST shifts are not applied
    step = timedelta(minutes=facility.slot_mins or 60)
    slots = []
    cursor = start
    while cursor + step <= end:
        slots.append(Slot(start=cursor, end=cursor + step))
        cursor += step

    logger.debug(
        f"Generated {len(slots)} slots for facility {facility.id} on {calendar_day}"
    )
    return slots


def booked_count(bookings: Iterable[Booking], start: datetime) -> int:
    """Head count of confirmed bookings starting at exactly this instant"""
    return sum(
        booking.people_count
        for booking in bookings
        if booking.is_confirmed and booking.starts_at == start
    )


def describe_slots(
    facility: Optional[Facility],
    day: Union[date, str],
    bookings: Iterable[Booking],
    now: Optional[datetime] = None,
) -> List[SlotAvailability]:
    """Slots for the day annotated with head count and past/full state"""
    if facility is None:
        return []

    now = now or datetime.now()
    bookings = list(bookings)
    return [
        SlotAvailability(
            slot=slot,
            booked=booked_count(bookings, slot.start),
            capacity=facility.capacity,
            is_past=slot.start < now,
        )
        for slot in generate_slots(facility, day)
    ]


def minutes_used(bookings: Iterable[Booking]) -> int:
    """Minutes a user has already booked for the day, cancelled bookings excluded"""
    return sum(
        booking.duration_minutes
        for booking in bookings
        if booking.status != BookingStatus.CANCELLED
    )


def remaining_minutes(used: int, quota: int = DAILY_QUOTA_MINUTES) -> int:
    return max(0, quota - used)


def parse_people_count(raw, capacity: int) -> int:
    """Clamp free-text people input to [1, capacity]; junk input counts as 1"""
    try:
        count = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return max(1, min(count, capacity))
