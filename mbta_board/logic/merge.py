"""Join scheduled and predicted stop events into departure rows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Sequence

from mbta_board.config import StopConfig
from mbta_board.data.records import PredictionRecord, ScheduleRecord
from mbta_board.logic.proximity import stops_away
from mbta_board.logic.timeparse import parse_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepartureRow:
    """One candidate departure at a stop."""

    scheduled: datetime | None = None
    predicted: datetime | None = None
    stops_away: int | None = None

    def __post_init__(self) -> None:
        if self.scheduled is None and self.predicted is None:
            raise ValueError("DepartureRow needs a scheduled or a predicted time")

    @property
    def effective_time(self) -> datetime | None:
        """Predicted time when live, otherwise the scheduled time."""
        return self.predicted or self.scheduled


def _pick_time(arrival: str | None, departure: str | None, is_origin: bool) -> str | None:
    if is_origin:
        return departure
    return arrival or departure


def merge_departures(
    schedules: Sequence[ScheduleRecord],
    predictions: Sequence[PredictionRecord],
    stop: StopConfig,
    vehicle_stops: dict[str, str],
    parent_map: dict[str, str],
    route_stops: Sequence[str],
) -> list[DepartureRow]:
    """Build one row per scheduled trip, enriched with its live prediction.

    Predictions for trips that are not on the schedule are dropped. When
    several predictions share a trip id the last one is used.
    """
    predictions_by_trip = {prediction.trip_id: prediction for prediction in predictions}

    rows = []
    for schedule in schedules:
        scheduled = parse_time(_pick_time(schedule.arrival_time, schedule.departure_time, stop.is_origin))
        predicted = None
        distance = None

        prediction = predictions_by_trip.get(schedule.trip_id)
        if prediction is not None:
            predicted = parse_time(
                _pick_time(prediction.arrival_time, prediction.departure_time, stop.is_origin)
            )
            vehicle_stop = vehicle_stops.get(prediction.vehicle_id) if prediction.vehicle_id else None
            if vehicle_stop and prediction.stop_id and route_stops:
                distance = stops_away(vehicle_stop, prediction.stop_id, parent_map, route_stops)

        if scheduled is None and predicted is None:
            logger.debug("Skipping trip %s at stop %s: no usable times", schedule.trip_id, stop.stop_id)
            continue

        rows.append(DepartureRow(scheduled=scheduled, predicted=predicted, stops_away=distance))
    return rows


__all__ = ["DepartureRow", "merge_departures"]
