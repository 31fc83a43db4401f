# backend/get_community.py


import logging
from typing import Any, Dict

import requests

from backend.errors import (
    BackendError,
    check_response,
    read_json,
    wrap_request_exception,
)
from models.session import Session
from utils.overstay import DEFAULT_OVERSTAY_LIMITS, merge_limits

logger = logging.getLogger("backend.get_community")

DEFAULT_OPERATING_HOURS = "09:00-21:00"


def get_community(session: Session) -> Dict[str, Any]:
    try:
        response = requests.get(
            session.url("/admin/community"),
            headers=session.headers(),
            params={"communityId": session.community_id},
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Failed to load community") from e

    check_response(response, "Failed to load community")
    data = read_json(response, "Failed to load community")
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    return data if isinstance(data, dict) else {}


def get_overstay_limits(session: Session) -> Dict[str, int]:
    """
    Community overstay limits merged over the defaults.

    Falls back to the defaults when the backend has none or cannot be reached.
    """
    try:
        community = get_community(session)
    except BackendError as e:
        logger.warning(f"Using default overstay limits: {e.message}")
        return dict(DEFAULT_OVERSTAY_LIMITS)

    return merge_limits(community.get("overstayLimits"))


def _reshape_facility(facility: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "facilityType": facility.get("facilityType"),
        "enabled": facility.get("enabled"),
        "quantity": facility.get("quantity"),
        "maxCapacity": facility.get("maxCapacity"),
        "isPaid": facility.get("isPaid"),
        "price": facility.get("price") or 0,
        "priceType": facility.get("priceType") or "per_hour",
        "operatingHours": facility.get("operatingHours") or DEFAULT_OPERATING_HOURS,
        "rules": facility.get("rules") or "",
    }


def save_overstay_limits(session: Session, limits: Dict[str, int]) -> bool:
    """
    Save overstay limits.

    The community endpoint only accepts the full community object, so the
    current record is fetched first and the limits merged into it.
    """
    try:
        community = get_community(session)
    except BackendError as e:
        logger.warning(f"Could not fetch existing community data: {e.message}")
        community = {}

    facilities = community.get("facilities") or []
    payload = {
        "name": community.get("name") or "",
        "description": community.get("description") or "",
        "address": community.get("address") or "",
        "facilities": [_reshape_facility(f) for f in facilities if isinstance(f, dict)],
        "overstayLimits": merge_limits(limits),
        "communityId": session.community_id,
    }

    try:
        response = requests.post(
            session.url("/admin/community"),
            headers=session.headers(json_body=True),
            json=payload,
            timeout=session.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Failed to save overstay limits") from e

    check_response(response, "Failed to save overstay limits")

    data = read_json(response, "Failed to save overstay limits")
    if isinstance(data, dict) and data.get("success"):
        logger.info("Overstay limits saved")
        return True

    message = "Server returned an unexpected response."
    if isinstance(data, dict) and data.get("message"):
        message = data["message"]
    raise BackendError(message, status_code=response.status_code)
