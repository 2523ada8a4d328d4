"""Exceptions raised for problems with configuration (never request input)."""

__all__ = ("MappingError", "ConfigurationError")


class MappingError(ValueError):
    """There was a problem with the field mapping document."""


class ConfigurationError(ValueError):
    """A configured default or setting is not usable."""
