"""Exception hierarchy for symbol lookups.

A missing artifact is never an exception: lookups return ``None`` for it.
Everything here is a failure the caller must be able to tell apart from
"not found".
"""

from typing import Any


class SymbolLookupError(Exception):
    """Base exception for all lookup failures.

    Attributes:
        message: Human-readable error message
        url: URL involved in the failure, if any
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: str | None = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class ConfigError(SymbolLookupError):
    """The symbol path configuration file exists but cannot be read."""


class InvalidArtifactKeyError(SymbolLookupError, ValueError):
    """A file name or debug id cannot be used as a cache path component."""


class InvalidJobUrlError(SymbolLookupError):
    """A constructed query URL is not a usable http(s) URL."""


class TransportError(SymbolLookupError):
    """Every fetch job failed before receiving an HTTP response.

    Attributes:
        errors: The per-job exceptions, in job order
    """

    def __init__(self, message: str, errors: list[Exception] | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.errors = errors or []


class CacheReadError(SymbolLookupError):
    """An existing cache entry could not be read."""


class DecompressionError(SymbolLookupError):
    """The selected response could not be turned into the requested file."""
