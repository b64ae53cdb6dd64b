"""Canonical timestamp helpers.

All timestamps at rest (database rows, import run log) are strings in
YYYY-MM-DDTHH:MM:SSZ format. Internal code may use tz-aware datetime
objects, but boundaries serialize to strings.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

# Canonical ts_utc format: exactly 20 characters, YYYY-MM-DDTHH:MM:SSZ
TS_UTC_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


def utc_now() -> datetime:
    """Return current UTC time as tz-aware datetime."""
    return datetime.now(UTC)


def format_ts_utc_z(dt: datetime) -> str:
    """Format a datetime as canonical UTC instant string (YYYY-MM-DDTHH:MM:SSZ).

    Converts any aware datetime to UTC before formatting.

    Args:
        dt: Datetime to format. Must be timezone-aware.

    Returns:
        Canonical instant string (exactly 20 characters).

    Raises:
        ValueError: If dt is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(f"Cannot format naive datetime {dt}. Provide timezone context.")

    if dt.tzinfo != UTC:
        dt = dt.astimezone(UTC)

    iso_str = dt.isoformat(timespec="seconds")
    if iso_str.endswith("+00:00"):
        return iso_str[:-6] + "Z"
    return iso_str


def now_ts_utc_z() -> str:
    """Return current UTC time as canonical instant string."""
    return format_ts_utc_z(utc_now())
