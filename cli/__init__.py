"""Command-line interface for music-replay."""
