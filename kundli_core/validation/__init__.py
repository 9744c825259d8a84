"""
Validation Module

This package provides input validation for birth details.
"""

from kundli_core.validation.validators import (
    sanitize_string,
    validate_name,
    validate_latitude,
    validate_longitude,
    validate_date_format,
    validate_time_format,
    validate_timezone,
    validate_local_datetime,
)

__all__ = [
    "sanitize_string",
    "validate_name",
    "validate_latitude",
    "validate_longitude",
    "validate_date_format",
    "validate_time_format",
    "validate_timezone",
    "validate_local_datetime",
]
