from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from mbta_board.config import BoardStop, MBTAConfig, StopConfig
from mbta_board.data.poller import StopResult, compute_departure_rows, poll_stops
from mbta_board.data.records import (
    MBTAClientError,
    MBTARateLimitError,
    PredictionFetch,
    PredictionRecord,
    ScheduleRecord,
    decode_schedules,
)

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
SETTINGS = MBTAConfig(api_key="")
STOP = StopConfig(route_id="60", stop_id="1519", direction_id=0)


def _iso(minutes: float) -> str:
    return (NOW + timedelta(minutes=minutes)).isoformat()


def _client() -> MagicMock:
    client = MagicMock()
    client.get_schedules.return_value = [
        ScheduleRecord("t1", arrival_time=_iso(2)),
        ScheduleRecord("t2", arrival_time=_iso(12)),
        ScheduleRecord("gone", arrival_time=_iso(-20)),
    ]
    client.get_predictions.return_value = PredictionFetch(
        predictions=[PredictionRecord("t1", arrival_time=_iso(3), vehicle_id="v1", stop_id="1519")],
        vehicle_stops={"v1": "70001"},
        stop_parents={},
    )
    client.get_parent_stations.return_value = {"70001": "1516", "1519": "1519"}
    client.get_route_stops.return_value = ["place-kencl", "1516", "1517", "1519"]
    return client


def test_compute_departure_rows_merges_and_ranks() -> None:
    client = _client()

    rows = compute_departure_rows(client, STOP, NOW, SETTINGS)

    assert [row.stops_away for row in rows] == [2, None]
    assert rows[0].predicted == NOW + timedelta(minutes=3)
    assert rows[1].scheduled == NOW + timedelta(minutes=12)
    client.get_schedules.assert_called_once_with("1519", "60", 0, min_time=(NOW - timedelta(minutes=30)).strftime("%H:%M"), limit=20)
    client.get_predictions.assert_called_once_with("1519", "60", 0, limit=3)
    client.get_parent_stations.assert_called_once_with(["1519", "70001"])


def test_compute_departure_rows_degrades_without_route_stops() -> None:
    client = _client()
    client.get_route_stops.side_effect = MBTAClientError("down")
    client.get_parent_stations.side_effect = MBTAClientError("down")

    rows = compute_departure_rows(client, STOP, NOW, SETTINGS)

    assert [row.stops_away for row in rows] == [None, None]


def test_poll_stops_keeps_order_and_isolates_errors() -> None:
    good = BoardStop("Good", STOP)
    bad = BoardStop("Bad", StopConfig(route_id="60", stop_id="bad", direction_id=1))
    client = _client()

    def schedules(stop_id, *args, **kwargs):
        if stop_id == "bad":
            raise MBTAClientError("HTTP 500")
        return [ScheduleRecord("t9", arrival_time=_iso(4))]

    client.get_schedules.side_effect = schedules

    results = poll_stops(client, [bad, good], NOW, SETTINGS)

    assert [result.stop.name for result in results] == ["Bad", "Good"]
    assert results[0] == StopResult(stop=bad, rows=[])
    assert len(results[1].rows) == 1


def test_poll_stops_rate_limit_aborts() -> None:
    client = _client()
    client.get_predictions.side_effect = MBTARateLimitError("MBTA API rate limit exceeded")

    with pytest.raises(MBTARateLimitError):
        poll_stops(client, [BoardStop("A", STOP), BoardStop("B", STOP)], NOW, SETTINGS)


def test_poll_stops_empty() -> None:
    assert poll_stops(MagicMock(), [], NOW, SETTINGS) == []


def test_poll_stops_malformed_document_only_blanks_that_stop() -> None:
    good = BoardStop("Good", STOP)
    broken = BoardStop("Broken", StopConfig(route_id="60", stop_id="broken", direction_id=1))
    client = _client()
    malformed = {
        "data": [
            {"attributes": {"arrival_time": 123}, "relationships": {"trip": {"data": {"id": "t1"}}}}
        ]
    }

    def schedules(stop_id, *args, **kwargs):
        if stop_id == "broken":
            return decode_schedules(malformed)
        return [ScheduleRecord("t9", arrival_time=_iso(4))]

    client.get_schedules.side_effect = schedules

    results = poll_stops(client, [broken, good], NOW, SETTINGS)

    assert results[0] == StopResult(stop=broken, rows=[])
    assert len(results[1].rows) == 1
