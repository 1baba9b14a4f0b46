"""Errors raised while loading or decoding configuration."""

from __future__ import annotations


class ConfigError(RuntimeError):
    """Base error for configuration load failures."""


class ConfigFileNotFoundError(ConfigError):
    """Raised when a configuration file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")
        self.path = path


class UnknownEncodingError(ConfigError):
    """Raised when no coder matches a file extension or MIME type."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Unable to determine configuration encoding for '{identifier}'")
        self.identifier = identifier


class DecodeError(ConfigError):
    """Raised when a document is malformed or misses a required field."""


class NetworkError(ConfigError):
    """Raised when a remote configuration document cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch '{url}': {reason}")
        self.url = url


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "DecodeError",
    "NetworkError",
    "UnknownEncodingError",
]
