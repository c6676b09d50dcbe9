"""Command line entry point: fetch every configured stop and print the board."""

from __future__ import annotations

import argparse
from datetime import datetime
import logging
from pathlib import Path
import sys

from mbta_board.config import LoggingConfig, load_config
from mbta_board.data.mbta_client import MBTAClient
from mbta_board.data.poller import poll_stops
from mbta_board.data.records import MBTARateLimitError
from mbta_board.rendering import render_board

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
RATE_LIMIT_MESSAGE = "⚠️  MBTA API rate limit exceeded. Please wait a moment and try again."


def configure_logging(config: LoggingConfig) -> None:
    """Send log records to stderr, and to <log_dir>/board.log when configured."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "board.log", encoding="utf-8"))
    logging.basicConfig(level=config.level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)


def main(argv: list[str] | None = None) -> int:
    """Fetch every configured stop once and print the board; returns the exit status."""
    parser = argparse.ArgumentParser(description="Print upcoming MBTA departures.")
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Path to the YAML configuration file",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    configure_logging(config.log)

    client = MBTAClient(
        api_key=config.mbta.api_key,
        base_url=config.mbta.base_url,
        timeout_seconds=config.mbta.timeout_seconds,
    )
    now = datetime.now().astimezone()
    stops = [board_stop for group in config.groups for board_stop in group.stops]

    try:
        results = poll_stops(client, stops, now, config.mbta)
    except MBTARateLimitError:
        print(RATE_LIMIT_MESSAGE, file=sys.stderr)
        return 1

    groups = []
    offset = 0
    for group in config.groups:
        group_results = results[offset : offset + len(group.stops)]
        groups.append((group.title, [(result.stop.name, result.rows) for result in group_results]))
        offset += len(group.stops)
    logger.debug("Rendering %d stops in %d groups", len(results), len(groups))
    sys.stdout.write(
        render_board(
            groups,
            now,
            column_width=config.display.column_width,
            max_rows=config.display.max_rows,
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
