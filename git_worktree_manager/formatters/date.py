"""Date and time formatting utilities."""

import re
from datetime import datetime, timezone
from typing import Any

# Fractional seconds of any precision; fromisoformat needs exactly 3 or 6 digits on 3.10
_FRACTION = re.compile(r"\.(\d+)")


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as an RFC 3339 timestamp.

    Naive datetimes are assumed to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware datetime.

    Accepts a trailing ``Z`` and fractional seconds of any precision.

    Raises:
        ValueError: If the value is not a timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(date: Any) -> str:
    """
    Format a date object to YYYY-MM-DD HH:MM string.

    Args:
        date: Date object (datetime or string)

    Returns:
        Formatted date string
    """
    if hasattr(date, "astimezone"):
        return date.astimezone().strftime("%Y-%m-%d %H:%M")
    return str(date)
