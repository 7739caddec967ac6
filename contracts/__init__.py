"""Versioned data contracts."""
