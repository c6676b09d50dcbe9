"""Data structures for rendering the board."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StopDisplay:
    """One grid column: a stop name and its rendered departure strings."""

    name: str
    times: list[str]  # up to 3 entries


__all__ = ["StopDisplay"]
