# booking_format.py


import json
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Union

from models.booking import Booking
from models.facility import Facility
from models.slot import SlotAvailability
from utils.overstay import format_duration


def format_slots(
    facility: Optional[Facility], availability: List[SlotAvailability]
) -> str:
    """Format the day's slots into readable output"""
    output = []
    output.append("=" * 60)
    output.append(f"SLOTS: {facility.name}" if facility else "SLOTS")
    output.append("=" * 60)

    if facility is None:
        output.append("Select a facility")
        return "\n".join(output)

    if not availability:
        output.append("No slots available")
        return "\n".join(output)

    for entry in availability:
        if entry.is_past:
            state = "past"
        elif entry.is_full:
            state = "full"
        else:
            state = f"{entry.remaining} left"
        output.append(f"  {entry}  [{state}]")

    return "\n".join(output)


def format_bookings(bookings: List[Booking]) -> str:
    """Group bookings by day for display"""
    bookings_by_day = defaultdict(list)
    for booking in bookings:
        bookings_by_day[booking.starts_at.date()].append(booking)

    output = []
    for day in sorted(bookings_by_day):
        output.append(f"\n{day.isoformat()}")
        output.append("-" * 60)
        for booking in sorted(bookings_by_day[day], key=lambda b: b.starts_at):
            line = f"  {booking}"
            if booking.note:
                line += f" - {booking.note}"
            output.append(line)

    return "\n".join(output)


def print_booking_statistics(stats: Dict[str, Union[int, float]]):
    """Print admin statistics about bookings"""
    print("\n" + "=" * 50)
    print("BOOKING STATISTICS")
    print("=" * 50)
    print(f"Total Bookings: {stats['total']}")
    print(f"Confirmed: {stats['confirmed']}")
    print(f"Cancelled: {stats['cancelled']}")
    print(f"Total Revenue: {stats['total_revenue']:.2f}")
    print("=" * 50)


def print_quota(used: int, left: int):
    print(f"Booked today: {format_duration(used)} | Left: {format_duration(left)}")


def generate_bookings_json(bookings: List[Booking], output_file: str = "bookings.json"):
    """Write bookings to a JSON file"""
    serialized = [
        {
            "id": booking.id,
            "user_id": booking.user_id,
            "facility_id": booking.facility_id,
            "starts_at": booking.starts_at.isoformat(),
            "ends_at": booking.ends_at.isoformat(),
            "status": booking.status.value,
            "people_count": booking.people_count,
            "note": booking.note,
            "amount": booking.amount,
        }
        for booking in sorted(bookings, key=lambda b: b.starts_at)
    ]

    output = {
        "metadata": {
            "total_bookings": len(serialized),
            "generation_timestamp": datetime.now().isoformat(),
        },
        "bookings": serialized,
    }

    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2)

    print(f"Bookings JSON file generated: {output_file}")
    return output
