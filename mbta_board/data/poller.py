"""Concurrent fetch of every configured stop."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from typing import Sequence

from mbta_board.config import BoardStop, MBTAConfig, StopConfig
from mbta_board.data.mbta_client import MBTAClient
from mbta_board.data.records import MBTAClientError, MBTARateLimitError
from mbta_board.logic.merge import DepartureRow, merge_departures
from mbta_board.logic.proximity import resolve_parent_stations
from mbta_board.logic.ranking import filter_and_rank

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StopResult:
    """Outcome of one stop's fetch-and-merge."""

    stop: BoardStop
    rows: list[DepartureRow]


def _route_stops(client: MBTAClient, stop: StopConfig) -> list[str]:
    try:
        return client.get_route_stops(stop.route_id, stop.direction_id)
    except MBTAClientError as exc:
        logger.warning(
            "Route stop list unavailable for route %s direction %s: %s",
            stop.route_id,
            stop.direction_id,
            exc,
        )
        return []


def compute_departure_rows(
    client: MBTAClient,
    stop: StopConfig,
    now: datetime,
    settings: MBTAConfig,
) -> list[DepartureRow]:
    """Fetch, merge, filter and rank the departures of one stop.

    Schedule and prediction failures propagate as MBTAClientError; parent
    station and route stop lookups degrade silently to less proximity data.
    """
    lookback = now - timedelta(minutes=settings.schedule_lookback_minutes)
    schedules = client.get_schedules(
        stop.stop_id,
        stop.route_id,
        stop.direction_id,
        min_time=lookback.strftime("%H:%M"),
        limit=settings.schedule_limit,
    )
    fetched = client.get_predictions(
        stop.stop_id,
        stop.route_id,
        stop.direction_id,
        limit=settings.prediction_limit,
    )

    wanted = list(fetched.vehicle_stops.values())
    wanted.extend(p.stop_id for p in fetched.predictions if p.stop_id)
    parent_map = resolve_parent_stations(wanted, fetched.stop_parents, client.get_parent_stations)
    route_stops = _route_stops(client, stop)

    rows = merge_departures(
        schedules,
        fetched.predictions,
        stop,
        fetched.vehicle_stops,
        parent_map,
        route_stops,
    )
    return filter_and_rank(rows, now)


def poll_stops(
    client: MBTAClient,
    stops: Sequence[BoardStop],
    now: datetime,
    settings: MBTAConfig,
) -> list[StopResult]:
    """Run every stop's fetch concurrently and return results in input order.

    A failing stop yields an empty row list. A rate limit on any stop is
    raised once all fetches have finished.
    """
    if not stops:
        return []

    with ThreadPoolExecutor(max_workers=len(stops)) as executor:
        futures = [
            executor.submit(compute_departure_rows, client, board_stop.config, now, settings)
            for board_stop in stops
        ]

    results = []
    rate_limited: MBTARateLimitError | None = None
    for board_stop, future in zip(stops, futures):
        try:
            results.append(StopResult(stop=board_stop, rows=future.result()))
        except MBTARateLimitError as exc:
            rate_limited = rate_limited or exc
        except MBTAClientError as exc:
            logger.warning("Error fetching %s data: %s", board_stop.name, exc)
            results.append(StopResult(stop=board_stop, rows=[]))

    if rate_limited is not None:
        raise rate_limited
    return results


__all__ = ["StopResult", "compute_departure_rows", "poll_stops"]
