"""Timestamp parsing for MBTA feed values."""

from __future__ import annotations

from datetime import datetime
from typing import Any


def parse_time(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp into the local zone.

    Feeds routinely leave one of arrival/departure empty, so a missing or
    unparsable value is returned as None rather than raised.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone()


def minutes_between(now: datetime, dt: datetime) -> int:
    """Whole minutes from `now` to `dt`, truncated toward zero."""
    return int((dt - now).total_seconds() / 60)


__all__ = ["minutes_between", "parse_time"]
