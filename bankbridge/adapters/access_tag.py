"""Deterministic access tags letting the partner deduplicate retried mutations.

The tag is the MD5 digest of the canonical text of every element, concatenated
in order. Time-sensitive operations pass ``minute_stamp(now)`` as one of the
elements, so an identical request repeated within the same minute yields the
same tag. Across a minute boundary the tag changes and the partner sees a new
request: this is best-effort de-duplication, not exactly-once delivery.
"""

from __future__ import annotations

import hashlib
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

MINUTE_FORMAT = "%Y-%m-%d %H:%M"


def minute_stamp(now: datetime) -> str:
    """Truncate a timestamp to minute precision (``YYYY-MM-DD HH:MM``)."""
    return now.strftime(MINUTE_FORMAT)


def canonical_text(value: Any) -> str:
    """Render one tag element as text.

    ``None`` is the empty string, booleans are ``"1"``/``""``, money-like values
    use two decimals so ``100``, ``100.0`` and ``"100.00"`` given as Decimal or
    float agree.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, Enum):
        return canonical_text(value.value)
    if isinstance(value, (Decimal, float)):
        return f"{Decimal(str(value)):.2f}"
    if isinstance(value, datetime):
        return minute_stamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def generate_access_tag(*elements: Any) -> str:
    """Return the 32-character hex tag for an ordered operation signature."""
    joined = "".join(canonical_text(element) for element in elements)
    return hashlib.md5(joined.encode("utf-8")).hexdigest()


__all__ = ["MINUTE_FORMAT", "canonical_text", "generate_access_tag", "minute_stamp"]
