"""Routewatch error hierarchy.

All routewatch-specific errors inherit from RouteWatchError for easy catching.
"""


class RouteWatchError(Exception):
    """Base error for all routewatch operations."""


class ConfigError(RouteWatchError):
    """Invalid or missing configuration."""


class SourceError(RouteWatchError):
    """The watched file could not be opened or read."""


class WatchSetupError(RouteWatchError):
    """A filesystem watch could not be established."""
