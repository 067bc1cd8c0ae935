from __future__ import annotations

"""Date and date-time conversion helpers for the partner's wire conventions.

Dates travel as ``YYYY-MM-DD``. Date-times travel as ``YYYY-MM-DD HH:MM:SS`` in
the partner's local time (Europe/Paris). Some endpoints answer with ISO-8601
variants instead, and unset dates come back as ``0000-00-00`` placeholders.
"""

from datetime import date, datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

PARTNER_TIMEZONE = ZoneInfo("Europe/Paris")
PARTNER_DATE_FORMAT = "%Y-%m-%d"
PARTNER_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_EMPTY_DATES = {"", "0000-00-00", "0000-00-00 00:00:00"}
_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y",
)


def parse_partner_date(value: Any) -> Optional[date]:
    """Parse a partner date, tolerating date-time strings and empty placeholders.

    Raises:
        ValueError: If a non-empty value cannot be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text in _EMPTY_DATES:
        return None
    try:
        return datetime.strptime(text[:10], PARTNER_DATE_FORMAT).date()
    except ValueError:
        return parse_partner_datetime(text).date()


def parse_partner_datetime(value: Any) -> Optional[datetime]:
    """Parse a partner date-time into a timezone-aware datetime.

    Naive values are interpreted in the partner's local time.

    Raises:
        ValueError: If a non-empty value matches none of the known formats.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text in _EMPTY_DATES:
            return None
        normalized = text
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            parsed = _parse_with_fallback(text)

    if parsed.tzinfo is None or parsed.tzinfo.utcoffset(parsed) is None:
        parsed = parsed.replace(tzinfo=PARTNER_TIMEZONE)
    return parsed


def _parse_with_fallback(text: str) -> datetime:
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized partner date-time: {text!r}")


def format_partner_date(value: date) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(PARTNER_DATE_FORMAT)


def format_partner_datetime(value: datetime) -> str:
    """Render a datetime in the partner's local wall-clock format."""
    if value.tzinfo is not None:
        value = value.astimezone(PARTNER_TIMEZONE)
    return value.strftime(PARTNER_DATETIME_FORMAT)


__all__ = [
    "PARTNER_DATETIME_FORMAT",
    "PARTNER_DATE_FORMAT",
    "PARTNER_TIMEZONE",
    "format_partner_date",
    "format_partner_datetime",
    "parse_partner_date",
    "parse_partner_datetime",
]
