# utils/overstay.py

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from utils.time_utils import parse_api_datetime

logger = logging.getLogger("utils.overstay")

# Minutes a checked-in visitor may stay, per visitor type.
DEFAULT_OVERSTAY_LIMITS: Dict[str, int] = {
    "DELIVERY": 10,
    "GUEST": 240,
    "STAFF": 600,
    "CAB_AUTO": 15,
    "OTHER": 120,
}


def merge_limits(limits: Optional[Dict[str, Any]]) -> Dict[str, int]:
    """Overlay backend limits on the defaults, ignoring non-numeric values"""
    merged = dict(DEFAULT_OVERSTAY_LIMITS)
    if not limits or not isinstance(limits, dict):
        return merged

    for visitor_type, minutes in limits.items():
        try:
            value = int(minutes)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring overstay limit {visitor_type}={minutes!r}")
            continue
        if value <= 0:
            logger.warning(f"Ignoring non-positive overstay limit {visitor_type}={value}")
            continue
        merged[str(visitor_type).upper()] = value
    return merged


def get_limit(limits: Dict[str, int], visitor_type: Optional[str]) -> int:
    key = (visitor_type or "").upper()
    if key in limits:
        return limits[key]
    return limits.get("OTHER", DEFAULT_OVERSTAY_LIMITS["OTHER"])


def overstay_minutes(check_in_at, now: Optional[datetime] = None) -> int:
    """Whole minutes elapsed since check-in, 0 when there is no check-in time"""
    if not check_in_at:
        return 0
    now = now or datetime.now()
    checked_in = parse_api_datetime(check_in_at)
    return max(0, int((now - checked_in).total_seconds() // 60))


def is_checked_in(visitor: Dict[str, Any]) -> bool:
    status = (visitor.get("status") or "").lower()
    checked_in = visitor.get("checkInAt") or status == "checked_in"
    checked_out = visitor.get("checkOutAt") or status == "checked_out"
    return bool(checked_in and not checked_out)


def is_overstaying(
    visitor: Dict[str, Any],
    limits: Optional[Dict[str, int]] = None,
    now: Optional[datetime] = None,
) -> bool:
    """A visitor overstays once checked in longer than the limit for their type"""
    if not is_checked_in(visitor):
        return False
    limits = limits or DEFAULT_OVERSTAY_LIMITS
    minutes = overstay_minutes(visitor.get("checkInAt") or visitor.get("expectedAt"), now)
    return minutes > get_limit(limits, visitor.get("visitorType"))


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min{'s' if minutes != 1 else ''}"
    hours, rest = divmod(minutes, 60)
    if rest:
        return f"{hours}h {rest}m"
    return f"{hours} hr{'s' if hours != 1 else ''}"
