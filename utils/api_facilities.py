# utils/api_facilities.py


from typing import Any, Dict

from models.facility import DEFAULT_CAPACITY, DEFAULT_SLOT_MINS, Facility


def _positive_int(value: Any, default: int) -> int:
    """Falsy, non-numeric or non-positive values fall back to the default"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def convert_api_facility(facility_data: Dict[str, Any]) -> Facility:
    """Convert API facility data to Facility object"""
    if not facility_data or not isinstance(facility_data, dict):
        raise ValueError(f"Invalid facility data: {facility_data}")

    facility_id = facility_data["id"]
    name = facility_data.get("name") or facility_data.get("facilityType") or str(
        facility_id
    )

    operating_hours = facility_data.get("operatingHours")
    if not isinstance(operating_hours, str):
        operating_hours = None

    return Facility(
        id=str(facility_id),
        name=name,
        operating_hours=operating_hours,
        slot_mins=_positive_int(facility_data.get("slotMins"), DEFAULT_SLOT_MINS),
        capacity=_positive_int(facility_data.get("capacity"), DEFAULT_CAPACITY),
        facility_type=facility_data.get("facilityType"),
    )
