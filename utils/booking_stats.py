# utils/booking_stats.py

from typing import Dict, List, Union

from models.booking import Booking, BookingStatus

BOOKING_TABS = ("all", "confirmed", "cancelled")


def filter_bookings(bookings: List[Booking], tab: str = "all") -> List[Booking]:
    """Filter bookings for one of the admin tabs"""
    tab = (tab or "all").lower()
    if tab not in BOOKING_TABS:
        raise ValueError(f"Unknown booking tab: {tab}")
    if tab == "all":
        return list(bookings)
    status = BookingStatus(tab)
    return [booking for booking in bookings if booking.status == status]


def booking_stats(bookings: List[Booking]) -> Dict[str, Union[int, float]]:
    confirmed = [b for b in bookings if b.is_confirmed]
    cancelled = [b for b in bookings if b.status == BookingStatus.CANCELLED]
    revenue = sum(b.amount for b in confirmed if b.amount)

    return {
        "total": len(bookings),
        "confirmed": len(confirmed),
        "cancelled": len(cancelled),
        "total_revenue": revenue,
    }
