"""Real-time MBTA departure board for the terminal."""
