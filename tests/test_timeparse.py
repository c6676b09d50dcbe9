from __future__ import annotations

from datetime import datetime, timedelta, timezone

from mbta_board.logic.timeparse import minutes_between, parse_time


def test_parse_time_with_offset_and_zulu() -> None:
    with_offset = parse_time("2024-01-01T08:00:00-05:00")
    zulu = parse_time("2024-01-01T13:00:00Z")

    assert with_offset is not None
    assert zulu is not None
    assert with_offset == zulu
    assert with_offset.tzinfo is not None


def test_parse_time_missing_or_bad_is_none() -> None:
    assert parse_time(None) is None
    assert parse_time("") is None
    assert parse_time("not a time") is None
    assert parse_time("2024-01-01T08:00:00") is None


def test_minutes_between_truncates_toward_zero() -> None:
    now = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    assert minutes_between(now, now + timedelta(minutes=4, seconds=59)) == 4
    assert minutes_between(now, now - timedelta(minutes=5, seconds=30)) == -5
    assert minutes_between(now, now - timedelta(seconds=30)) == 0


def test_parse_time_non_string_is_none() -> None:
    assert parse_time(123) is None
    assert parse_time(["2024-01-01T08:00:00Z"]) is None
