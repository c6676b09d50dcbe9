from __future__ import annotations

from unittest.mock import MagicMock

from mbta_board.data.records import MBTAClientError
from mbta_board.logic.proximity import resolve_parent_stations, stops_away

ROUTE = [f"s{i}" for i in range(30)]


def test_stops_away_bounds() -> None:
    assert stops_away("s5", "s5", {}, ROUTE) is None
    assert stops_away("s0", "s21", {}, ROUTE) is None
    assert stops_away("s4", "s5", {}, ROUTE) == 1
    assert stops_away("s0", "s20", {}, ROUTE) == 20


def test_stops_away_is_direction_agnostic() -> None:
    assert stops_away("s9", "s6", {}, ROUTE) == 3


def test_stops_away_uses_parent_stations() -> None:
    parents = {"70150": "s2", "70152": "s7"}

    assert stops_away("70152", "70150", parents, ROUTE) == 5


def test_stops_away_unknown_stop_or_empty_route() -> None:
    assert stops_away("elsewhere", "s1", {}, ROUTE) is None
    assert stops_away("s0", "s1", {}, []) is None


def test_resolve_parent_stations_single_deduplicated_lookup() -> None:
    lookup = MagicMock(return_value={"a": "place-a", "b": "b"})

    resolved = resolve_parent_stations(["a", "b", "a", "known"], {"known": "place-k"}, lookup)

    lookup.assert_called_once_with(["a", "b"])
    assert resolved == {"known": "place-k", "a": "place-a", "b": "b"}


def test_resolve_parent_stations_skips_lookup_when_all_known() -> None:
    lookup = MagicMock()
    partial = {"a": "place-a"}

    assert resolve_parent_stations(["a"], partial, lookup) == {"a": "place-a"}
    lookup.assert_not_called()


def test_resolve_parent_stations_failure_falls_back_to_self() -> None:
    lookup = MagicMock(side_effect=MBTAClientError("boom"))
    partial = {"known": "place-k"}

    resolved = resolve_parent_stations(["x", "y"], partial, lookup)

    assert resolved == {"known": "place-k", "x": "x", "y": "y"}
    assert partial == {"known": "place-k"}


def test_resolve_parent_stations_unreported_ids_map_to_self() -> None:
    lookup = MagicMock(return_value={"x": "place-x"})

    assert resolve_parent_stations(["x", "y"], {}, lookup) == {"x": "place-x", "y": "y"}
