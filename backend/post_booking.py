# backend/post_booking.py

import logging
from typing import Optional

import requests

from backend.errors import (
    BackendError,
    check_response,
    wrap_request_exception,
)
from models.booking import Booking, BookingStatus
from models.session import Session
from models.slot import Slot
from utils.api_bookings import (
    convert_api_booking,
    convert_booking_request_to_api_format,
    extract_record,
)

logger = logging.getLogger("backend.post_booking")

CREATE_BOOKING_STATUS_MESSAGES = {
    400: "Invalid booking data. Please check your inputs.",
    403: "You don't have permission to make this booking.",
    409: "This time slot conflicts with another booking.",
}


def create_booking(
    session: Session,
    facility_id: str,
    slot: Slot,
    people_count: int,
    note: str = "",
) -> Booking:
    """
    Submit a validated booking to the backend.

    The backend decides; a rejection (capacity race, quota, etc.) raises
    BackendError with its message.

    Returns:
        The booking as stored by the backend. When the response carries no
        record, a confirmed booking is built from the request.
    """
    payload = convert_booking_request_to_api_format(
        session.user_id,
        facility_id,
        slot,
        people_count,
        note=note,
        community_id=session.community_id,
    )
    logger.info(
        f"Creating booking on facility {facility_id} at {slot.start_iso} for {people_count} people"
    )

    try:
        response = requests.post(
            session.url("/resident/bookings"),
            headers=session.headers(json_body=True),
            json=payload,
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Failed to create booking") from e

    check_response(
        response, "Failed to create booking", CREATE_BOOKING_STATUS_MESSAGES
    )

    record = None
    try:
        record = extract_record(response.json())
    except ValueError:
        logger.info("Backend returned non-JSON response")

    if record is not None:
        try:
            booking = convert_api_booking(record)
            logger.info(f"Booking created with ID: {booking.id}")
            return booking
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Could not read created booking: {str(e)}")

    return Booking(
        id="",
        user_id=session.user_id or "",
        facility_id=str(facility_id),
        starts_at=slot.start,
        ends_at=slot.end,
        status=BookingStatus.CONFIRMED,
        people_count=people_count,
        note=note or None,
    )


def cancel_booking_request(session: Session, booking_id: str) -> Optional[Booking]:
    """
    Ask the backend to cancel a booking.

    Returns:
        The updated booking when the backend echoes it, otherwise None
    """
    if not booking_id:
        raise BackendError("Missing booking id")

    logger.info(f"Cancelling booking {booking_id}")

    try:
        response = requests.patch(
            session.url(f"/resident/bookings/{booking_id}/cancel"),
            headers=session.headers(json_body=True),
            json={},
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Failed to cancel booking") from e

    check_response(response, "Failed to cancel booking")

    try:
        record = extract_record(response.json())
    except ValueError:
        return None

    if record is None:
        return None
    try:
        return convert_api_booking(record)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Could not read cancelled booking: {str(e)}")
        return None
