"""Exceptions raised by the I/O side of the tool.

The routing engine never raises these; they come from loading or saving
files and talking to PyPI, and are turned into console messages by the CLI.
"""

from typing import Any


class ModelManagerError(Exception):
    """Base class for user-facing failures."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(ModelManagerError):
    """Problem with the CCR config file."""


class ConfigNotFoundError(ConfigError):
    """The CCR config file does not exist."""


class ConfigReadError(ConfigError):
    """The CCR config file could not be read or parsed."""


class ConfigWriteError(ConfigError):
    """The CCR config file could not be written."""


class UpdateError(ModelManagerError):
    """Version lookup against the package index failed."""


class OutputWriteError(ModelManagerError):
    """A report or export file could not be written."""
