# utils/api_bookings.py

import logging
from typing import Any, Dict, List, Optional

from models.booking import Booking, BookingStatus
from models.slot import Slot
from utils.time_utils import parse_api_datetime, to_api_datetime

logger = logging.getLogger("utils.api_bookings")


def convert_api_status(status: Optional[str]) -> BookingStatus:
    """Backend uses both "confirmed" and "CONFIRMED"; unknown values are pending"""
    if not status:
        return BookingStatus.PENDING
    try:
        return BookingStatus(str(status).strip().lower())
    except ValueError:
        logger.warning(f"Unknown booking status {status!r}, treating as pending")
        return BookingStatus.PENDING


def convert_api_booking(booking_data: Dict[str, Any]) -> Booking:
    """Convert API booking data to Booking object"""
    if not booking_data or not isinstance(booking_data, dict):
        raise ValueError(f"Invalid booking data: {booking_data}")

    people_count = booking_data.get("peopleCount") or 1
    amount = booking_data.get("amount")

    return Booking(
        id=str(booking_data["id"]),
        user_id=str(booking_data.get("userId", "")),
        facility_id=str(booking_data.get("facilityId", "")),
        starts_at=parse_api_datetime(booking_data["startsAt"]),
        ends_at=parse_api_datetime(booking_data["endsAt"]),
        status=convert_api_status(booking_data.get("status")),
        people_count=int(people_count),
        note=booking_data.get("note"),
        amount=float(amount) if amount is not None else None,
    )


def convert_api_booking_list(bookings_data: List[Dict[str, Any]]) -> List[Booking]:
    """Convert a list of API bookings, skipping records that fail to convert"""
    bookings = []
    for booking_data in bookings_data:
        try:
            bookings.append(convert_api_booking(booking_data))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(
                f"Error converting booking {booking_data.get('id', 'unknown') if isinstance(booking_data, dict) else booking_data}: {str(e)}"
            )
    return bookings


def convert_booking_request_to_api_format(
    user_id: Optional[str],
    facility_id: str,
    slot: Slot,
    people_count: int,
    note: str = "",
    community_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the create-booking payload expected by the backend"""
    payload = {
        "userId": user_id,
        "facilityId": facility_id,
        "startsAt": to_api_datetime(slot.start),
        "endsAt": to_api_datetime(slot.end),
        "note": note or "",
        "peopleCount": people_count,
    }
    if community_id:
        payload["communityId"] = community_id
    return payload


def extract_list(data: Any, key: str = "data") -> List[Any]:
    """Accept both {"data": [...]} and bare list response shapes"""
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    if isinstance(data, list):
        return data
    return []


def extract_record(data: Any) -> Optional[Dict[str, Any]]:
    """Unwrap a single record from {"data": {...}}, {"booking": {...}} or a bare dict"""
    if not isinstance(data, dict):
        return None
    for key in ("data", "booking"):
        if isinstance(data.get(key), dict):
            return data[key]
    if "id" in data:
        return data
    return None
