"""
unicache — Memory Cache Backend

In-process cache used by the ``none`` engine. Entries expire lazily: an
expired entry is dropped the next time it is read. There is no eviction
beyond TTL.
"""

import asyncio
import copy
import logging
import time
from dataclasses import dataclass
from typing import Any

from ...errors import CacheKeyNotFoundError, CacheValueTypeError
from ..interface import CacheAdapter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    value: Any
    expiry: float | None
    is_object: bool = False


class MemoryCacheAdapter(CacheAdapter):
    """
    In-memory cache adapter.

    Features:
    - Per-entry TTL with lazy expiry on read
    - Objects stored as deep copies, so later mutation by the caller does
      not leak into the cache
    - asyncio lock around every access
    """

    backend = "memory"

    def __init__(
        self,
        default_ttl: int = 86400,
        namespace: str = "",
    ):
        """
        Initialize memory cache adapter.

        Args:
            default_ttl: Default TTL in seconds (0 = no expiry)
            namespace: Label of the data set, used in logs
        """
        super().__init__(default_ttl=default_ttl)
        self.namespace = namespace

        # Cache storage: key -> entry
        self._cache: dict[str, _Entry] = {}

        self._lock = asyncio.Lock()

    def _expiry(self, ttl: int) -> float | None:
        return time.time() + ttl if ttl > 0 else None

    @staticmethod
    def _is_expired(entry: _Entry) -> bool:
        """Check if entry is expired."""
        if entry.expiry is None:
            return False
        return time.time() > entry.expiry

    def _live_entry(self, key: str) -> _Entry | None:
        """Return the entry for key, dropping it first if it has expired. Caller holds the lock."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._cache[key]
            logger.debug(f"Expired key dropped from memory cache: {key}", extra={"namespace": self.namespace})
            return None
        return entry

    async def _get(self, key: str) -> Any | None:
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            return copy.deepcopy(entry.value) if entry.is_object else entry.value

    async def _get_object(self, key: str) -> Any | None:
        return await self._get(key)

    async def _set(self, key: str, value: Any, ttl: int) -> None:
        async with self._lock:
            self._cache[key] = _Entry(value, self._expiry(ttl))

    async def _set_object(self, key: str, value: dict[str, Any] | list[Any], ttl: int) -> None:
        async with self._lock:
            self._cache[key] = _Entry(copy.deepcopy(value), self._expiry(ttl), is_object=True)

    async def _delete(self, key: str) -> None:
        async with self._lock:
            self._cache.pop(key, None)

    async def _multi_get(self, keys: list[str]) -> dict[str, Any]:
        async with self._lock:
            result = {}
            for key in keys:
                entry = self._live_entry(key)
                if entry is not None and not entry.is_object:
                    result[key] = entry.value
            return result

    async def _add(self, key: str, amount: int) -> int:
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                raise CacheKeyNotFoundError(key)
            if entry.is_object or isinstance(entry.value, bool) or not isinstance(entry.value, int):
                raise CacheValueTypeError(key, "integer")
            entry.value += amount
            return entry.value

    async def _increment(self, key: str, amount: int) -> int:
        return await self._add(key, amount)

    async def _decrement(self, key: str, amount: int) -> int:
        return await self._add(key, -amount)

    async def _touch(self, key: str, lifetime: int) -> bool:
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return False
            entry.expiry = self._expiry(lifetime)
            return True

    def size(self) -> int:
        """Number of stored entries, expired ones included until they are read."""
        return len(self._cache)
