"""Errors raised while resolving run options."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised when options cannot be resolved into run settings."""


class ConfigurationConflictError(ConfigurationError):
    """Raised when merged options contradict each other."""


class InvalidArgumentError(ConfigurationError):
    """Raised when a single argument cannot be parsed."""


class ProfileNotFoundError(ConfigurationError):
    """Raised when a requested profile is not defined."""


class ProfileFileError(ConfigurationError):
    """Raised when the profile file cannot be interpreted."""
