"""Rendering utilities for the terminal departure board."""

from mbta_board.rendering.composer import render_board, render_grid
from mbta_board.rendering.frame_data import StopDisplay

__all__ = ["StopDisplay", "render_board", "render_grid"]
