"""Parent station resolution and stops-away estimation."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from mbta_board.data.records import MBTAClientError

logger = logging.getLogger(__name__)

MAX_STOPS_AWAY = 20


def resolve_parent_stations(
    stop_ids: Iterable[str],
    parent_map: dict[str, str],
    lookup: Callable[[list[str]], dict[str, str]],
) -> dict[str, str]:
    """Complete `parent_map` for `stop_ids` with a single batched lookup.

    Returns a new map; the input map is left untouched. Ids the lookup does
    not resolve, including when it fails, map to themselves.
    """
    resolved = dict(parent_map)
    unknown = sorted({stop_id for stop_id in stop_ids if stop_id not in resolved})
    if not unknown:
        return resolved

    try:
        resolved.update(lookup(unknown))
    except MBTAClientError as exc:
        logger.warning("Parent station lookup failed for %s: %s", ",".join(unknown), exc)

    for stop_id in unknown:
        resolved.setdefault(stop_id, stop_id)
    return resolved


def stops_away(
    vehicle_stop: str,
    target_stop: str,
    parent_map: dict[str, str],
    route_stops: Sequence[str],
) -> int | None:
    """Count route positions between a vehicle's stop and the target stop.

    Both stops are compared at parent-station level. A distance of zero
    (vehicle at the stop) or above MAX_STOPS_AWAY is treated as noise.
    """
    if not route_stops:
        return None

    vehicle_parent = parent_map.get(vehicle_stop, vehicle_stop)
    target_parent = parent_map.get(target_stop, target_stop)
    try:
        vehicle_index = route_stops.index(vehicle_parent)
        target_index = route_stops.index(target_parent)
    except ValueError:
        return None

    distance = abs(target_index - vehicle_index)
    if 0 < distance <= MAX_STOPS_AWAY:
        return distance
    return None


__all__ = ["MAX_STOPS_AWAY", "resolve_parent_stations", "stops_away"]
