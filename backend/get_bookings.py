# backend/get_bookings.py


import logging
from datetime import date
from typing import Any, Dict, List, Union

import requests

from backend.errors import check_response, read_json, wrap_request_exception
from models.booking import Booking
from models.session import Session
from utils.api_bookings import convert_api_booking_list, extract_list

logger = logging.getLogger("backend.get_bookings")


def _fetch_booking_list(
    session: Session, path: str, params: Dict[str, Any], error_message: str
) -> List[Booking]:
    try:
        response = requests.get(
            session.url(path),
            headers=session.headers(),
            params=params,
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, error_message) from e

    check_response(response, error_message)
    bookings_data = extract_list(read_json(response, error_message))
    logger.debug(f"{path} returned {len(bookings_data)} bookings")

    return convert_api_booking_list(bookings_data)


def get_bookings(
    session: Session, facility_id: str, day: Union[date, str]
) -> List[Booking]:
    """
    Fetch every booking of a facility on one day.

    Returns:
        Bookings sorted by start time
    """
    bookings = _fetch_booking_list(
        session,
        "/resident/bookings",
        {"facilityId": facility_id, "date": str(day)},
        "Failed to load bookings",
    )
    return sorted(bookings, key=lambda b: b.starts_at)


def get_user_bookings(session: Session, day: Union[date, str]) -> List[Booking]:
    """Fetch the session user's own bookings for a day, across facilities"""
    return _fetch_booking_list(
        session,
        "/resident/user-bookings",
        {"userId": session.user_id, "date": str(day)},
        "Failed to load your bookings",
    )


def get_admin_bookings(session: Session) -> List[Booking]:
    """Fetch all bookings of the community for the admin dashboard"""
    try:
        response = requests.get(
            session.url("/admin/bookings"),
            headers=session.headers(),
            params={"communityId": session.community_id},
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Failed to load bookings data") from e

    check_response(response, "Failed to load bookings data")
    bookings_data = extract_list(
        read_json(response, "Failed to load bookings data"), key="bookings"
    )
    logger.debug(f"Admin bookings response contained {len(bookings_data)} bookings")

    return convert_api_booking_list(bookings_data)
