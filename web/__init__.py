"""Local web UI for music-replay."""

__version__ = "1.0.0"
