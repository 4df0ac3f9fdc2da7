"""Exception taxonomy shared across the relay pipeline."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for every failure the orchestrator knows how to report."""


class NetworkError(RelayError):
    """Fetching the listing or delivering a message did not complete."""


class ParseError(RelayError):
    """The listing document does not have the expected row layout."""


class CorruptLogError(RelayError):
    """The persisted sent log exists but cannot be decoded."""


class ConfigurationError(RelayError):
    """Configuration is missing or invalid."""


__all__ = [
    "ConfigurationError",
    "CorruptLogError",
    "NetworkError",
    "ParseError",
    "RelayError",
]
