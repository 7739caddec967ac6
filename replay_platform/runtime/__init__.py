"""Runtime configuration and SDK implementations for the replay platform."""
