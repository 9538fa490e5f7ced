"""ISO-8601 timestamp helpers."""

from __future__ import annotations

import math
from datetime import datetime, timezone

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a provider timestamp, returning None when absent or unparseable.

    Naive values are assumed to be UTC.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(ISO_FORMAT)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds between two instants, floored."""
    return math.floor((end - start).total_seconds())
