"""Command-line control for a single Sonos speaker."""

__version__ = "1.0.0"
