"""Stale-row filtering and chronological ranking of departure rows."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from mbta_board.logic.merge import DepartureRow
from mbta_board.logic.timeparse import minutes_between

STALE_AFTER_MINUTES = 5


def _is_recent(row: DepartureRow, now: datetime) -> bool:
    s_diff = minutes_between(now, row.scheduled) if row.scheduled is not None else 0
    p_diff = minutes_between(now, row.predicted) if row.predicted is not None else s_diff
    return s_diff > -STALE_AFTER_MINUTES or p_diff > -STALE_AFTER_MINUTES


def filter_and_rank(rows: Iterable[DepartureRow], now: datetime) -> list[DepartureRow]:
    """Drop stale rows and sort the rest by their best known time.

    A row is stale once both of its times are more than five minutes past.
    When any row carries live data, schedule-only rows that are already in
    the past are dropped as superseded.
    """
    kept = [row for row in rows if _is_recent(row, now)]

    if any(row.predicted is not None for row in kept):
        kept = [
            row
            for row in kept
            if row.predicted is not None or (row.scheduled is not None and row.scheduled > now)
        ]

    sentinel = now + timedelta(days=1)
    return sorted(kept, key=lambda row: row.effective_time or sentinel)


__all__ = ["STALE_AFTER_MINUTES", "filter_and_rank"]
