"""Timestamp helpers for board documents.

Documents store their timestamps as ISO-8601 strings in UTC with
millisecond precision and a trailing ``Z`` (``2024-05-01T12:00:00.000Z``),
the format JavaScript's ``Date.toISOString`` produces. Keeping a fixed width
means two stamps compare the same way as strings and as datetimes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def to_iso(moment: datetime) -> str:
    """Render an aware or naive (assumed UTC) datetime in document format."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """Capture the current instant once, in document format."""
    return to_iso(now or datetime.now(timezone.utc))


def parse_iso(value: str) -> datetime:
    """Parse a document timestamp back into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
