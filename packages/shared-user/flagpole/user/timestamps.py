"""Canonical timestamp handling.

User records carry ``updatedAt`` as a fixed-format UTC string with millisecond
precision, for example ``2018-08-13T19:06:38.123Z``. That string is the only
precision ever persisted, so timestamps must be canonicalized through it
before comparing a live user with one rebuilt from a record.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

TIMESTAMP_PATTERN = re.compile(
    r"^([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})\.([0-9]{3})Z\Z"
)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a canonical timestamp string.

    Naive datetimes are taken to be UTC already.

    Examples:
        >>> format_timestamp(datetime(2018, 8, 13, 19, 6, 38, 123456, tzinfo=UTC))
        '2018-08-13T19:06:38.123Z'
    """
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def parse_timestamp(value: str) -> datetime | None:
    """Parse a canonical timestamp string.

    Returns:
        An aware UTC datetime, or None if the string is not canonical.
    """
    if not isinstance(value, str):
        return None
    match = TIMESTAMP_PATTERN.match(value)
    if match is None:
        return None
    year, month, day, hour, minute, second, millis = (int(part) for part in match.groups())
    try:
        return datetime(
            year, month, day, hour, minute, second, millis * 1000, tzinfo=UTC
        )
    except ValueError:
        return None


def canonicalize_timestamp(value: datetime) -> datetime:
    """Truncate a datetime to the precision a record preserves."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)
