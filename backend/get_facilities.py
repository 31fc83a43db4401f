# backend/get_facilities.py


import logging
from typing import List, Optional

import requests

from backend.errors import check_response, read_json, wrap_request_exception
from models.facility import Facility
from models.session import Session
from utils.api_bookings import extract_list
from utils.api_facilities import convert_api_facility

logger = logging.getLogger("backend.get_facilities")


def get_facilities(session: Session) -> List[Facility]:
    """
    Fetch the bookable facilities of the session's community.

    Returns:
        List of Facility objects; records that fail to convert are skipped
    """
    params = {}
    if session.community_id:
        params["communityId"] = session.community_id

    try:
        response = requests.get(
            session.url("/resident/facilities"),
            headers=session.headers(),
            params=params,
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Failed to load facilities") from e

    check_response(response, "Failed to load facilities")
    facilities_data = extract_list(read_json(response, "Failed to load facilities"))

    logger.debug(f"Raw API response contained {len(facilities_data)} facilities")

    facilities = []
    for facility_data in facilities_data:
        try:
            facility = convert_api_facility(facility_data)
            facilities.append(facility)
            logger.debug(f"Converted facility: {facility}")
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Error converting facility {facility_data}: {str(e)}")

    return facilities


def get_facility_by_id(session: Session, facility_id: str) -> Optional[Facility]:
    for facility in get_facilities(session):
        if facility.id == str(facility_id):
            return facility
    return None
