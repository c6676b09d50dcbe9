"""MBTA v3 API client."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

from mbta_board.config import DEFAULT_BASE_URL
from mbta_board.data.records import (
    MBTAClientError,
    MBTARateLimitError,
    PredictionFetch,
    ScheduleRecord,
    decode_predictions,
    decode_route_stops,
    decode_schedules,
    decode_stop_parents,
)

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class MBTAClient:
    """Thin wrapper around the MBTA v3 API using requests.

    The client holds only read-only settings, so one instance is shared by
    every concurrent stop fetch.
    """

    def __init__(self, api_key: str = "", base_url: str = DEFAULT_BASE_URL, timeout_seconds: int = 10) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    def get_schedules(
        self,
        stop_id: str,
        route_id: str,
        direction_id: int,
        min_time: str,
        limit: int = 20,
    ) -> list[ScheduleRecord]:
        """Fetch schedules at a stop from `min_time` (HH:MM) onward."""
        params = {
            "filter[stop]": stop_id,
            "filter[route]": route_id,
            "filter[direction_id]": direction_id,
            "sort": "arrival_time",
            "filter[min_time]": min_time,
            "page[limit]": limit,
        }
        return decode_schedules(self._get("/schedules", params=params))

    def get_predictions(
        self,
        stop_id: str,
        route_id: str,
        direction_id: int,
        limit: int = 3,
    ) -> PredictionFetch:
        """Fetch predictions at a stop with their vehicles and stops sideloaded."""
        params = {
            "filter[stop]": stop_id,
            "filter[route]": route_id,
            "filter[direction_id]": direction_id,
            "sort": "arrival_time",
            "page[limit]": limit,
            "include": "vehicle,stop",
        }
        return decode_predictions(self._get("/predictions", params=params))

    def get_parent_stations(self, stop_ids: Iterable[str]) -> dict[str, str]:
        """Look up the parent station of several stops in one request."""
        params = {"filter[id]": ",".join(stop_ids)}
        return decode_stop_parents(self._get("/stops", params=params))

    def get_route_stops(self, route_id: str, direction_id: int) -> list[str]:
        """Fetch the ordered stop ids served by a route in one direction."""
        params = {
            "filter[route]": route_id,
            "filter[direction_id]": direction_id,
        }
        return decode_route_stops(self._get("/stops", params=params))

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = {"accept": JSONAPI_MEDIA_TYPE}
        if self._api_key:
            headers["x-api-key"] = self._api_key
        try:
            response = requests.get(url, headers=headers, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise MBTAClientError(f"MBTA API request failed: {exc}") from exc

        if response.status_code == 429:
            raise MBTARateLimitError("MBTA API rate limit exceeded")

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            raise MBTAClientError(f"MBTA API request failed: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            logger.debug("Unparsable body from %s: %s", path, response.text)
            raise MBTAClientError("MBTA API response was not valid JSON") from exc


__all__ = ["MBTAClient", "MBTAClientError", "MBTARateLimitError"]
