"""
unicache — Core Error Types

Defines the exception hierarchy and the error codes carried by failed
cache results.

Only configuration faults are raised to callers. Operation faults are
raised inside adapters and converted to a failed CacheResult at the
adapter boundary.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Error categories attached to failed cache results.

    The per-call-site ``error_code`` string identifies where a failure
    happened; this enum groups those sites by what went wrong.
    """

    INVALID_KEY = "INVALID_KEY"
    INVALID_VALUE = "INVALID_VALUE"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    NON_NUMERIC_VALUE = "NON_NUMERIC_VALUE"
    CACHE_FAILURE = "CACHE_FAILURE"


class UnicacheError(Exception):
    """Base exception for all unicache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging and error reports."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(UnicacheError):
    """Raised when configuration is invalid or missing."""


class CacheError(UnicacheError):
    """Base exception for cache-related errors."""


class CacheOperationError(CacheError):
    """Raised by an adapter primitive when a cache operation cannot complete."""


class CacheKeyNotFoundError(CacheOperationError):
    """Raised when an operation requires an existing entry and there is none."""

    def __init__(self, key: str):
        super().__init__(f"Cache key not found: {key}", {"key": key})
        self.key = key


class CacheValueTypeError(CacheOperationError):
    """Raised when an entry holds a value the operation cannot work on."""

    def __init__(self, key: str, expected: str):
        super().__init__(
            f"Cache entry '{key}' does not hold a {expected} value",
            {"key": key, "expected": expected},
        )
        self.key = key
        self.expected = expected


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Map an exception raised by an adapter primitive to an ErrorCode.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, CacheKeyNotFoundError):
        return ErrorCode.KEY_NOT_FOUND

    if isinstance(error, CacheValueTypeError):
        return ErrorCode.NON_NUMERIC_VALUE

    return ErrorCode.CACHE_FAILURE
