# utils/time_utils.py


import re
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple, Union

HM_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def convert_api_time_to_time_object(time_str: str) -> time:
    """Convert time string from API (HH:MM format) to time object"""
    hours, minutes = map(int, time_str.split(":"))
    return time(hours, minutes)


def parse_operating_hours(value) -> Optional[Tuple[time, time]]:
    """
    Parse an "HH:MM-HH:MM" operating-hours string.

    Returns None for anything that is not a two-part string whose sides both
    match the 24-hour pattern. Start/end ordering is left to the caller.
    """
    if not value or not isinstance(value, str):
        return None

    parts = [part.strip() for part in value.split("-")]
    if len(parts) != 2:
        return None

    start_hm, end_hm = parts
    if not HM_PATTERN.match(start_hm) or not HM_PATTERN.match(end_hm):
        return None

    return (
        convert_api_time_to_time_object(start_hm),
        convert_api_time_to_time_object(end_hm),
    )


def parse_calendar_date(value: Union[date, str]) -> Optional[date]:
    """Accept a date object or a YYYY-MM-DD string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_api_datetime(value: str) -> datetime:
    """
    Convert an ISO-8601 instant from the API to a naive local datetime.

    Offset-aware values (including a trailing "Z") are shifted to local time
    so they compare directly with generated slots.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_api_datetime(value: datetime) -> str:
    """Naive local datetime -> UTC ISO string with a trailing Z"""
    utc_value = value.astimezone(timezone.utc)
    return utc_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_value.microsecond // 1000:03d}Z"
