"""Text grid composer for the terminal departure board."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from mbta_board.logic.merge import DepartureRow
from mbta_board.logic.timeparse import minutes_between
from mbta_board.rendering.frame_data import StopDisplay

COLUMN_WIDTH = 32
COLUMN_GAP = "  "
MAX_ROWS = 3

LIVE_GLYPH = "🟢"
SCHEDULED_GLYPH = "📅"
# Both glyphs render two cells wide in common terminals.
WIDE_GLYPHS = frozenset({LIVE_GLYPH, SCHEDULED_GLYPH})

NO_TRIPS_TEXT = "No upcoming trips"


def display_width(text: str) -> int:
    """Terminal cell width of `text`, counting the status glyphs as two cells."""
    return sum(2 if char in WIDE_GLYPHS else 1 for char in text)


def pad_to_width(text: str, width: int) -> str:
    """Right-pad `text` with spaces to `width` display cells."""
    current = display_width(text)
    if current >= width:
        return text
    return text + " " * (width - current)


def format_time_compact(dt: datetime, now: datetime, include_seconds: bool = False) -> str:
    """Format a departure as clock time plus a relative hint.

    Examples: "08:05 (in 5m)", "07:58 (2m ago)", "08:00:30" when under a minute.
    """
    clock = dt.strftime("%H:%M:%S" if include_seconds else "%H:%M")
    diff = minutes_between(now, dt)
    if abs(diff) < 1:
        return clock
    if diff < 0:
        return f"{clock} ({abs(diff)}m ago)"
    return f"{clock} (in {diff}m)"


def _format_row(row: DepartureRow, now: datetime, include_seconds: bool) -> str | None:
    if row.predicted is not None:
        text = f"{LIVE_GLYPH} {format_time_compact(row.predicted, now, include_seconds)}"
        if row.stops_away is not None and row.stops_away > 0:
            plural = "" if row.stops_away == 1 else "s"
            text = f"{text} ({row.stops_away} stop{plural})"
        return text
    if row.scheduled is not None:
        return f"{SCHEDULED_GLYPH} {format_time_compact(row.scheduled, now)}"
    return None


def format_stop(
    name: str,
    rows: Sequence[DepartureRow],
    now: datetime,
    highlight_live: bool = True,
    max_rows: int = MAX_ROWS,
) -> StopDisplay:
    """Render up to `max_rows` rows of one stop.

    With `highlight_live`, the first live row gets seconds precision.
    """
    times: list[str] = []
    for row in rows[:max_rows]:
        include_seconds = highlight_live and row.predicted is not None
        text = _format_row(row, now, include_seconds)
        if text is None:
            continue
        if include_seconds:
            highlight_live = False
        times.append(text)

    if not times:
        times.append(NO_TRIPS_TEXT)
    return StopDisplay(name=name, times=times)


def format_stops(
    stops: Sequence[tuple[str, Sequence[DepartureRow]]],
    now: datetime,
    highlight_live: bool = True,
    max_rows: int = MAX_ROWS,
) -> list[StopDisplay]:
    """Render several stops, giving seconds precision to at most one live row."""
    displays = []
    for name, rows in stops:
        shown = rows[:max_rows]
        displays.append(format_stop(name, rows, now, highlight_live, max_rows))
        if any(row.predicted is not None for row in shown):
            highlight_live = False
    return displays


def wrap_name(name: str, width: int = COLUMN_WIDTH) -> list[str]:
    """Word-wrap a stop name to `width` display cells without splitting words."""
    lines: list[str] = []
    current = ""
    for word in name.split():
        separator = 1 if current else 0
        if display_width(current) + separator + display_width(word) <= width:
            current = f"{current} {word}" if current else word
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def compose_grid(title: str, displays: Sequence[StopDisplay], column_width: int = COLUMN_WIDTH) -> str:
    """Lay out pre-rendered stop columns under a title."""
    lines = [title]

    wrapped = [wrap_name(display.name, column_width) for display in displays]
    name_height = max((len(name_lines) for name_lines in wrapped), default=1)
    for line_index in range(name_height):
        cells = [
            name_lines[line_index] if line_index < len(name_lines) else ""
            for name_lines in wrapped
        ]
        lines.append("".join(pad_to_width(cell, column_width) + COLUMN_GAP for cell in cells))

    time_height = max((len(display.times) for display in displays), default=0)
    for time_index in range(time_height):
        cells = [
            display.times[time_index] if time_index < len(display.times) else ""
            for display in displays
        ]
        lines.append("".join(pad_to_width(cell, column_width) + COLUMN_GAP for cell in cells))

    lines.append("")
    return "\n".join(lines) + "\n"


def render_grid(
    title: str,
    stops: Sequence[tuple[str, Sequence[DepartureRow]]],
    now: datetime,
    column_width: int = COLUMN_WIDTH,
    max_rows: int = MAX_ROWS,
) -> str:
    """Render one titled block of stop columns."""
    return compose_grid(title, format_stops(stops, now, max_rows=max_rows), column_width)


def render_board(
    groups: Sequence[tuple[str, Sequence[tuple[str, Sequence[DepartureRow]]]]],
    now: datetime,
    column_width: int = COLUMN_WIDTH,
    max_rows: int = MAX_ROWS,
) -> str:
    """Render several titled blocks; only the board's first live row shows seconds."""
    blocks = []
    highlight_live = True
    for title, stops in groups:
        displays = format_stops(stops, now, highlight_live, max_rows)
        if any(row.predicted is not None for _, rows in stops for row in rows[:max_rows]):
            highlight_live = False
        blocks.append(compose_grid(title, displays, column_width))
    return "".join(blocks)


__all__ = [
    "COLUMN_WIDTH",
    "LIVE_GLYPH",
    "NO_TRIPS_TEXT",
    "SCHEDULED_GLYPH",
    "compose_grid",
    "display_width",
    "format_stop",
    "format_stops",
    "format_time_compact",
    "pad_to_width",
    "render_board",
    "render_grid",
    "wrap_name",
]
