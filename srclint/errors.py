"""Exception types raised by srclint."""

from __future__ import annotations


class SrclintError(Exception):
    """Base class for all srclint errors."""


class FileReadError(SrclintError):
    """Raised when a source unit cannot be read."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


class ParseError(SrclintError):
    """A source unit could not be parsed into a syntax tree."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class ConfigError(SrclintError):
    """Raised when the configuration file is malformed."""


class RegistryFrozenError(SrclintError):
    """Raised when the rule registry is changed after filtering was applied."""
