"""Configuration loader for the MBTA departure board."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Any

from dotenv import load_dotenv
import yaml

DEFAULT_BASE_URL = "https://api-v3.mbta.com"


@dataclass(frozen=True)
class StopConfig:
    """A monitored stop on one route and direction.

    Origin stops are keyed on departure time; every other stop prefers the
    arrival time and falls back to departure.
    """

    route_id: str
    stop_id: str
    direction_id: int
    is_origin: bool = False


@dataclass(frozen=True)
class BoardStop:
    """A stop together with the label shown above its column."""

    name: str
    config: StopConfig


@dataclass(frozen=True)
class BoardGroup:
    """Stops printed side by side under one title."""

    title: str
    stops: tuple[BoardStop, ...]


@dataclass(frozen=True)
class MBTAConfig:
    """MBTA API configuration."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: int = 10
    schedule_lookback_minutes: int = 30
    schedule_limit: int = 20
    prediction_limit: int = 3


@dataclass(frozen=True)
class DisplayConfig:
    """Terminal grid layout."""

    column_width: int = 32
    max_rows: int = 3


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str | None


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    mbta: MBTAConfig
    display: DisplayConfig
    log: LoggingConfig
    groups: tuple[BoardGroup, ...]


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _require_mapping(value: Any, context: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"'{context}' config must be a mapping")
    return value


def _parse_level(level: Any) -> str:
    name = str(level).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(f"Unknown logging level '{level}' in logging config")
    return name


def _parse_stop(entry: Any, context: str) -> BoardStop:
    entry = _require_mapping(entry, context)
    direction_id = _require_key(entry, "direction_id", context)
    if direction_id not in (0, 1):
        raise ValueError(f"direction_id in {context} config must be 0 or 1, got {direction_id!r}")
    stop = StopConfig(
        route_id=str(_require_key(entry, "route_id", context)),
        stop_id=str(_require_key(entry, "stop_id", context)),
        direction_id=direction_id,
        is_origin=bool(entry.get("is_origin", False)),
    )
    return BoardStop(name=str(_require_key(entry, "name", context)), config=stop)


def _parse_groups(raw_groups: Any) -> tuple[BoardGroup, ...]:
    if not isinstance(raw_groups, list) or not raw_groups:
        raise ValueError("'groups' config must be a non-empty list")

    groups = []
    for index, raw_group in enumerate(raw_groups):
        context = f"groups[{index}]"
        raw_group = _require_mapping(raw_group, context)
        raw_stops = _require_key(raw_group, "stops", context)
        if not isinstance(raw_stops, list) or not raw_stops:
            raise ValueError(f"'stops' in {context} config must be a non-empty list")
        stops = tuple(
            _parse_stop(raw_stop, f"{context}.stops[{stop_index}]")
            for stop_index, raw_stop in enumerate(raw_stops)
        )
        groups.append(BoardGroup(title=str(_require_key(raw_group, "title", context)), stops=stops))
    return tuple(groups)


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    api_key = os.environ.get("MBTA_API_KEY", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    mbta_section = _require_mapping(data.get("mbta") or {}, "mbta")
    display_section = _require_mapping(data.get("display") or {}, "display")
    logging_section = _require_mapping(_require_key(data, "logging", "logging"), "logging")

    mbta = MBTAConfig(
        api_key=api_key,
        base_url=mbta_section.get("base_url", DEFAULT_BASE_URL),
        timeout_seconds=mbta_section.get("timeout_seconds", 10),
        schedule_lookback_minutes=mbta_section.get("schedule_lookback_minutes", 30),
        schedule_limit=mbta_section.get("schedule_limit", 20),
        prediction_limit=mbta_section.get("prediction_limit", 3),
    )

    display = DisplayConfig(
        column_width=display_section.get("column_width", 32),
        max_rows=display_section.get("max_rows", 3),
    )

    log = LoggingConfig(
        level=_parse_level(_require_key(logging_section, "level", "logging")),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    groups = _parse_groups(_require_key(data, "groups", "top-level"))

    return AppConfig(mbta=mbta, display=display, log=log, groups=groups)
