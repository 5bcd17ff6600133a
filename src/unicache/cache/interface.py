"""
unicache — Cache Adapter Interface

Defines the operation contract every engine implements and the
normalization layer that keeps engines indistinguishable to callers.

Public operations live here and are shared by all engines:
- inputs are validated before the transport is touched
- engine primitives are awaited and their exceptions wrapped
- raw results are normalized (objects never come out of ``get`` or
  ``multi_get``, scalars never come out of ``get_object``)

Engines only implement the underscore-prefixed primitives.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from ..errors import ErrorCode, extract_error_code
from .response import CacheResult
from .validation import (
    is_object,
    is_scalar,
    is_valid_amount,
    is_valid_key,
    is_valid_lifetime,
    is_valid_object_value,
    is_valid_scalar_value,
)

logger = logging.getLogger(__name__)

_SITE_BY_KIND = {
    ErrorCode.KEY_NOT_FOUND: "not_found",
    ErrorCode.NON_NUMERIC_VALUE: "non_numeric",
    ErrorCode.CACHE_FAILURE: "transport_error",
}


class CacheAdapter(ABC):
    """
    Abstract base class for cache engines.

    Every operation returns a CacheResult and never raises. Subclasses set
    ``backend`` (used in error codes and logs) and implement the raw
    primitives against their transport.
    """

    backend: str = "base"

    def __init__(self, default_ttl: int = 86400):
        """
        Args:
            default_ttl: TTL in seconds applied to every write (0 = no expiry)
        """
        self.default_ttl = max(0, int(default_ttl))

    # ------------ Raw primitives ------------

    @abstractmethod
    async def _get(self, key: str) -> Any | None:
        """Return the decoded value stored under key, or None if absent."""

    @abstractmethod
    async def _get_object(self, key: str) -> Any | None:
        """Return the decoded object stored under key, or None if absent."""

    @abstractmethod
    async def _set(self, key: str, value: Any, ttl: int) -> None:
        """Store a scalar value."""

    @abstractmethod
    async def _set_object(self, key: str, value: dict[str, Any] | list[Any], ttl: int) -> None:
        """Store a structured value."""

    @abstractmethod
    async def _delete(self, key: str) -> None:
        """Remove key (absent keys are not an error)."""

    @abstractmethod
    async def _multi_get(self, keys: list[str]) -> dict[str, Any]:
        """Return decoded values for the keys that are present."""

    @abstractmethod
    async def _increment(self, key: str, amount: int) -> int:
        """Add amount to an existing integer entry and return the new value."""

    @abstractmethod
    async def _decrement(self, key: str, amount: int) -> int:
        """Subtract amount from an existing integer entry and return the new value."""

    @abstractmethod
    async def _touch(self, key: str, lifetime: int) -> bool:
        """Set a new lifetime on key. Returns False if key is absent."""

    # ------------ Failure helpers ------------

    def _code(self, operation: str, site: str) -> str:
        return f"{self.backend}.{operation}.{site}"

    def _invalid(self, operation: str, site: str, kind: ErrorCode, message: str) -> CacheResult:
        logger.debug(
            "Rejected %s.%s: %s",
            self.backend,
            operation,
            message,
            extra={"backend": self.backend, "operation": operation, "site": site},
        )
        return CacheResult.fail(self._code(operation, site), kind, message)

    def _is_connectivity_error(self, error: Exception) -> bool:
        """Whether error means the transport could not reach the server."""
        return isinstance(error, (ConnectionError, TimeoutError))

    def _operation_failure(self, operation: str, error: Exception, key: str | None = None) -> CacheResult:
        """Wrap an exception raised by a primitive into a failed result."""
        kind = extract_error_code(error)
        details: dict[str, Any] = {"backend": self.backend, "operation": operation}
        if key is not None:
            details["key"] = key

        if kind is ErrorCode.CACHE_FAILURE:
            details["error"] = str(error)
            if self._is_connectivity_error(error):
                logger.warning(
                    f"Connectivity issue with {self.backend} server during {operation}: {error}",
                    extra=details,
                )
            else:
                logger.error(
                    f"Failed to {operation} on {self.backend}: {error}",
                    extra=details,
                    exc_info=True,
                )

        return CacheResult.fail(self._code(operation, _SITE_BY_KIND[kind]), kind, str(error), details)

    # ------------ Core Interface ------------

    async def get(self, key: str) -> CacheResult:
        """Get the scalar value for key; None if absent or holding an object."""
        if not is_valid_key(key):
            return self._invalid("get", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        try:
            value = await self._get(key)
        except Exception as e:
            return self._operation_failure("get", e, key)
        return CacheResult.ok(value if is_scalar(value) else None)

    async def get_object(self, key: str) -> CacheResult:
        """Get the object value for key; None if absent or holding a scalar."""
        if not is_valid_key(key):
            return self._invalid("get_object", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        try:
            value = await self._get_object(key)
        except Exception as e:
            return self._operation_failure("get_object", e, key)
        return CacheResult.ok(value if is_object(value) else None)

    async def set(self, key: str, value: Any) -> CacheResult:
        """Store a scalar value under key with the default TTL."""
        if not is_valid_key(key):
            return self._invalid("set", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        if not is_valid_scalar_value(value):
            return self._invalid("set", "invalid_value", ErrorCode.INVALID_VALUE, "Cache value validation failed")
        try:
            await self._set(key, value, self.default_ttl)
        except Exception as e:
            return self._operation_failure("set", e, key)
        return CacheResult.ok(True)

    async def set_object(self, key: str, value: dict[str, Any] | list[Any]) -> CacheResult:
        """Store a structured value under key with the default TTL."""
        if not is_valid_key(key):
            return self._invalid("set_object", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        if not is_valid_object_value(value):
            return self._invalid(
                "set_object", "invalid_value", ErrorCode.INVALID_VALUE, "Cache value validation failed"
            )
        try:
            await self._set_object(key, value, self.default_ttl)
        except Exception as e:
            return self._operation_failure("set_object", e, key)
        return CacheResult.ok(True)

    async def delete(self, key: str) -> CacheResult:
        """Delete key. Succeeds whether or not the key existed."""
        if not is_valid_key(key):
            return self._invalid("delete", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        try:
            await self._delete(key)
        except Exception as e:
            return self._operation_failure("delete", e, key)
        return CacheResult.ok(True)

    async def multi_get(self, keys: Sequence[str]) -> CacheResult:
        """
        Get scalar values for several keys.

        The response maps every requested key to its scalar value, or to
        None when the key is absent or holds an object.
        """
        if not isinstance(keys, (list, tuple)) or not keys:
            return self._invalid(
                "multi_get", "invalid_keys", ErrorCode.INVALID_KEY, "Cache keys should be a non-empty list"
            )
        if not all(is_valid_key(key) for key in keys):
            return self._invalid("multi_get", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")

        unique_keys = list(dict.fromkeys(keys))
        try:
            found = await self._multi_get(unique_keys)
        except Exception as e:
            return self._operation_failure("multi_get", e)

        response = {}
        for key in unique_keys:
            value = found.get(key)
            response[key] = value if is_scalar(value) else None
        return CacheResult.ok(response)

    async def increment(self, key: str, by_value: int = 1) -> CacheResult:
        """Increment an existing integer entry and return its new value."""
        if not is_valid_key(key):
            return self._invalid("increment", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        if not is_valid_amount(by_value):
            return self._invalid(
                "increment", "invalid_amount", ErrorCode.INVALID_VALUE, "Increment amount must be a positive integer"
            )
        try:
            value = await self._increment(key, by_value)
        except Exception as e:
            return self._operation_failure("increment", e, key)
        return CacheResult.ok(value)

    async def decrement(self, key: str, by_value: int = 1) -> CacheResult:
        """Decrement an existing integer entry and return its new value."""
        if not is_valid_key(key):
            return self._invalid("decrement", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        if not is_valid_amount(by_value):
            return self._invalid(
                "decrement", "invalid_amount", ErrorCode.INVALID_VALUE, "Decrement amount must be a positive integer"
            )
        try:
            value = await self._decrement(key, by_value)
        except Exception as e:
            return self._operation_failure("decrement", e, key)
        return CacheResult.ok(value)

    async def touch(self, key: str, lifetime: int) -> CacheResult:
        """Give an existing entry a new lifetime in seconds."""
        if not is_valid_key(key):
            return self._invalid("touch", "invalid_key", ErrorCode.INVALID_KEY, "Cache key validation failed")
        if not is_valid_lifetime(lifetime):
            return self._invalid(
                "touch", "invalid_lifetime", ErrorCode.INVALID_VALUE, "Lifetime must be a positive integer"
            )
        try:
            touched = await self._touch(key, lifetime)
        except Exception as e:
            return self._operation_failure("touch", e, key)
        if not touched:
            return CacheResult.fail(
                self._code("touch", "not_found"),
                ErrorCode.KEY_NOT_FOUND,
                f"Cache key not found: {key}",
                {"backend": self.backend, "operation": "touch", "key": key},
            )
        return CacheResult.ok(True)
