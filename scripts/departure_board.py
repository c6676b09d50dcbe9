"""Print the departure board once, using config/config.yaml."""

from __future__ import annotations

from mbta_board.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
