"""
Birth Input Validators

Field-level checks applied to birth details before any astronomical
calculation runs. Every validator returns the cleaned value or raises
InvalidBirthDetailsError.
"""

import math
import re
from datetime import date, datetime, time
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kundli_core.domain.kundali.errors import InvalidBirthDetailsError


NAME_MAX_LENGTH = 100


def sanitize_string(value: Any, max_length: int = 500) -> str:
    """
    Normalize a free-text field: truncate, drop null bytes and strip.
    """
    if not isinstance(value, str):
        return str(value)

    value = value[:max_length]
    value = value.replace("\x00", "")

    return value.strip()


def validate_name(name: str) -> str:
    """
    Validate and sanitize a name field.

    Names should contain only letters, spaces, and basic punctuation.
    """
    if not name or not isinstance(name, str):
        raise InvalidBirthDetailsError("Name must not be empty")

    name = sanitize_string(name, max_length=NAME_MAX_LENGTH)

    if not name:
        raise InvalidBirthDetailsError("Name must not be empty")

    # Only allow letters, spaces, hyphens, apostrophes, and periods
    if not re.match(r"^[\w\s\.\'\-]+$", name, re.UNICODE):
        raise InvalidBirthDetailsError("Name contains invalid characters")

    return name


def _finite_number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidBirthDetailsError(f"{label} must be a number")
    if not math.isfinite(value):
        raise InvalidBirthDetailsError(f"{label} must be finite")
    return float(value)


def validate_latitude(lat: float) -> float:
    """Validate latitude range."""
    lat = _finite_number(lat, "Latitude")
    if lat < -90 or lat > 90:
        raise InvalidBirthDetailsError("Latitude must be between -90 and 90")
    return lat


def validate_longitude(lon: float) -> float:
    """Validate longitude range."""
    lon = _finite_number(lon, "Longitude")
    if lon < -180 or lon > 180:
        raise InvalidBirthDetailsError("Longitude must be between -180 and 180")
    return lon


def validate_date_format(date_str: str) -> date:
    """Validate and parse ISO date format (YYYY-MM-DD)."""
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise InvalidBirthDetailsError("Invalid date format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(date_str)
    except ValueError as exc:
        raise InvalidBirthDetailsError(f"Invalid date: {date_str}") from exc


def validate_time_format(time_str: str) -> time:
    """Validate and parse time format (HH:MM or HH:MM:SS)."""
    if not isinstance(time_str, str) or not re.match(r"^\d{2}:\d{2}(:\d{2})?$", time_str):
        raise InvalidBirthDetailsError("Invalid time format. Use HH:MM")
    try:
        return time.fromisoformat(time_str)
    except ValueError as exc:
        raise InvalidBirthDetailsError(f"Invalid time: {time_str}") from exc


def validate_timezone(timezone: str) -> str:
    """Validate an IANA timezone identifier such as 'Asia/Kolkata'."""
    if not timezone or not isinstance(timezone, str):
        raise InvalidBirthDetailsError("Timezone must not be empty")
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidBirthDetailsError(f"Unknown timezone: {timezone}") from exc
    return timezone


def validate_local_datetime(birth_date: date, birth_time: time) -> datetime:
    """Combine date and time, rejecting non-date/time values."""
    if not isinstance(birth_date, date) or isinstance(birth_date, datetime):
        raise InvalidBirthDetailsError("Birth date must be a date")
    if not isinstance(birth_time, time):
        raise InvalidBirthDetailsError("Birth time must be a time")
    return datetime.combine(birth_date, birth_time)
