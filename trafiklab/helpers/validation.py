"""
Validation helpers for Trafiklab values.

Pure predicates used by consumers (and the test suite) to check data that the
client itself passes through without range checks.
"""

import re
from datetime import date, datetime

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0


def is_valid_datetime_string(value: str | datetime) -> bool:
    """
    Check whether a value is an ISO 8601 date-time.

    Args:
        value: String such as "2025-03-31T16:30:00" or "2025-03-31T16:30:00Z",
            or an already parsed datetime

    Returns:
        True if the value parses as a date-time

    Examples:
        >>> is_valid_datetime_string("2025-03-31T16:30:00Z")
        True
        >>> is_valid_datetime_string("invalid-date")
        False
    """
    if isinstance(value, datetime):
        return True
    if not isinstance(value, str) or not value:
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_date_string(value: str | date) -> bool:
    """Check for a YYYY-MM-DD date (the format of Trip.start_date)."""
    if isinstance(value, date):
        return True
    return isinstance(value, str) and _DATE_PATTERN.fullmatch(value) is not None


def is_valid_stop_id(value: object) -> bool:
    """A stop ID is any non-empty string."""
    return isinstance(value, str) and len(value) > 0


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Latitude within [-90, 90] and longitude within [-180, 180], bounds included."""
    return -MAX_LATITUDE <= lat <= MAX_LATITUDE and -MAX_LONGITUDE <= lon <= MAX_LONGITUDE
