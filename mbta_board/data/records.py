"""Typed records decoded from MBTA v3 JSON:API documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class MBTAClientError(Exception):
    """Raised when an MBTA API request fails or returns a non-200 response."""


class MBTARateLimitError(MBTAClientError):
    """Raised when the MBTA API answers with HTTP 429."""


class MBTADecodeError(MBTAClientError):
    """Raised when a response document does not have the expected shape."""


@dataclass(frozen=True)
class ScheduleRecord:
    """One scheduled stop event for a trip."""

    trip_id: str
    arrival_time: str | None = None
    departure_time: str | None = None


@dataclass(frozen=True)
class PredictionRecord:
    """One live stop event for a trip."""

    trip_id: str
    arrival_time: str | None = None
    departure_time: str | None = None
    vehicle_id: str | None = None
    stop_id: str | None = None


@dataclass(frozen=True)
class PredictionFetch:
    """Decoded prediction response plus the lookup tables built from `included`."""

    predictions: list[PredictionRecord]
    vehicle_stops: dict[str, str] = field(default_factory=dict)
    stop_parents: dict[str, str] = field(default_factory=dict)


def _related_id(resource: dict[str, Any], name: str) -> str | None:
    relationships = resource.get("relationships") or {}
    relation = relationships.get(name) or {}
    data = relation.get("data") if isinstance(relation, dict) else None
    if isinstance(data, dict) and data.get("id") is not None:
        return str(data["id"])
    return None


def _resources(document: Any) -> list[dict[str, Any]]:
    if not isinstance(document, dict) or not isinstance(document.get("data"), list):
        raise MBTADecodeError("MBTA API response has no 'data' array")
    return [item for item in document["data"] if isinstance(item, dict)]


def _trip_id(resource: dict[str, Any]) -> str:
    trip_id = _related_id(resource, "trip")
    if trip_id is None:
        raise MBTADecodeError(f"Resource {resource.get('id')!r} has no trip relationship")
    return trip_id


def _time_attribute(resource: dict[str, Any], name: str) -> str | None:
    attributes = resource.get("attributes") or {}
    if not isinstance(attributes, dict):
        raise MBTADecodeError(f"Resource {resource.get('id')!r} has malformed attributes")
    value = attributes.get(name)
    if value is not None and not isinstance(value, str):
        raise MBTADecodeError(f"Resource {resource.get('id')!r} has a non-string {name}: {value!r}")
    return value


def decode_schedules(document: Any) -> list[ScheduleRecord]:
    """Decode a /schedules document."""
    records = []
    for resource in _resources(document):
        records.append(
            ScheduleRecord(
                trip_id=_trip_id(resource),
                arrival_time=_time_attribute(resource, "arrival_time"),
                departure_time=_time_attribute(resource, "departure_time"),
            )
        )
    return records


def _parent_of(resource: dict[str, Any]) -> str:
    return _related_id(resource, "parent_station") or str(resource.get("id"))


def decode_predictions(document: Any) -> PredictionFetch:
    """Decode a /predictions document requested with include=vehicle,stop.

    Included vehicles give the vehicle's current child stop; included stops
    give a first set of child to parent station mappings.
    """
    predictions = []
    for resource in _resources(document):
        predictions.append(
            PredictionRecord(
                trip_id=_trip_id(resource),
                arrival_time=_time_attribute(resource, "arrival_time"),
                departure_time=_time_attribute(resource, "departure_time"),
                vehicle_id=_related_id(resource, "vehicle"),
                stop_id=_related_id(resource, "stop"),
            )
        )

    vehicle_stops: dict[str, str] = {}
    stop_parents: dict[str, str] = {}
    for included in document.get("included") or []:
        if not isinstance(included, dict) or included.get("id") is None:
            continue
        resource_id = str(included["id"])
        if included.get("type") == "vehicle":
            current_stop = _related_id(included, "stop")
            if current_stop is not None:
                vehicle_stops[resource_id] = current_stop
        elif included.get("type") == "stop":
            stop_parents[resource_id] = _parent_of(included)

    return PredictionFetch(predictions=predictions, vehicle_stops=vehicle_stops, stop_parents=stop_parents)


def decode_stop_parents(document: Any) -> dict[str, str]:
    """Decode a /stops?filter[id]=... document into child -> parent mappings."""
    return {
        str(resource["id"]): _parent_of(resource)
        for resource in _resources(document)
        if resource.get("id") is not None
    }


def decode_route_stops(document: Any) -> list[str]:
    """Decode a /stops?filter[route]=... document into its ordered stop ids."""
    return [str(resource["id"]) for resource in _resources(document) if resource.get("id") is not None]


__all__ = [
    "MBTAClientError",
    "MBTADecodeError",
    "MBTARateLimitError",
    "PredictionFetch",
    "PredictionRecord",
    "ScheduleRecord",
    "decode_predictions",
    "decode_route_stops",
    "decode_schedules",
    "decode_stop_parents",
]
