"""
unicache — Memcached Cache Backend

Adapter for the ``memcached`` engine, built on pymemcache's HashClient so
keys are spread over the configured server list.

Memcached only stores byte strings:
- every value is written as UTF-8 JSON (objects whole, no field-wise split)
- objects come back from ``get_many`` like any other value; the shared
  normalization layer turns them into None for ``multi_get``

pymemcache is synchronous; each call runs in a worker thread through
``asyncio.to_thread`` so the event loop never blocks on the socket.

Requires: pymemcache>=4.0 (optional extra ``unicache[memcached]``)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ...errors import CacheKeyNotFoundError, CacheOperationError, CacheValueTypeError
from ..codec import from_json, to_json
from ..interface import CacheAdapter

logger = logging.getLogger(__name__)

DEFAULT_MEMCACHED_PORT = 11211

# Server reply for incr/decr on a value that is not a decimal integer
_NON_NUMERIC_REPLY = "non-numeric"


def parse_server(server: str) -> tuple[str, int]:
    """Split "host:port" into a (host, port) tuple; port defaults to 11211."""
    host, sep, port = server.strip().rpartition(":")
    if not sep:
        return server.strip(), DEFAULT_MEMCACHED_PORT
    return host, int(port)


def _build_client(
    servers: list[str],
    timeout: float,
    retries: int,
    retry_timeout: float,
) -> Any:
    """Create a pymemcache HashClient (lazy import keeps pymemcache optional)."""
    from pymemcache.client.hash import HashClient

    return HashClient(
        [parse_server(server) for server in servers],
        connect_timeout=timeout,
        timeout=timeout,
        retry_attempts=retries,
        retry_timeout=retry_timeout,
        dead_timeout=retry_timeout,
        allow_unicode_keys=True,
        default_noreply=False,
        ignore_exc=False,
    )


class MemcachedCacheAdapter(CacheAdapter):
    """
    Memcached cache adapter with JSON serialization and TTL.

    Notes:
    - TTL is passed as the memcached expire time (0 -> no expiry).
    - ``decrement`` stops at zero, as memcached itself does.
    """

    backend = "memcached"

    def __init__(
        self,
        servers: list[str],
        default_ttl: int = 86400,
        timeout: float = 0.5,
        retries: int = 1,
        retry_timeout: float = 1.0,
        client: Any | None = None,
    ) -> None:
        """
        Initialize Memcached cache adapter.

        Args:
            servers: "host:port" entries
            default_ttl: Default TTL in seconds (0 => no expiry)
            timeout: Connect and per-call socket timeout in seconds
            retries: Attempts against a server before it is marked dead
            retry_timeout: Seconds between retries and before a dead server is retried
            client: Pre-built client (tests); other connection args are ignored
        """
        if not servers:
            raise ValueError("servers is required")

        super().__init__(default_ttl=default_ttl)
        self.servers = list(servers)
        if client is None:
            client = _build_client(self.servers, timeout, retries, retry_timeout)
        self._client = client
        logger.debug(
            f"Memcached cache adapter ready for {len(self.servers)} server(s)",
            extra={"servers": self.servers},
        )

    def _is_connectivity_error(self, error: Exception) -> bool:
        # pymemcache surfaces socket faults as OSError subclasses
        return isinstance(error, (ConnectionError, TimeoutError, OSError))

    async def _call(self, method: str, *args: Any, **kwargs: Any) -> Any:
        return await asyncio.to_thread(getattr(self._client, method), *args, **kwargs)

    # ------------ Primitives ------------

    async def _get(self, key: str) -> Any | None:
        return from_json(await self._call("get", key))

    async def _get_object(self, key: str) -> Any | None:
        return await self._get(key)

    async def _set(self, key: str, value: Any, ttl: int) -> None:
        stored = await self._call("set", key, to_json(value), expire=ttl, noreply=False)
        if not stored:
            raise CacheOperationError(f"Memcached did not store key '{key}'", {"key": key})

    async def _set_object(self, key: str, value: dict[str, Any] | list[Any], ttl: int) -> None:
        await self._set(key, value, ttl)

    async def _delete(self, key: str) -> None:
        await self._call("delete", key, noreply=False)

    async def _multi_get(self, keys: list[str]) -> dict[str, Any]:
        found = await self._call("get_many", keys)
        return {key: from_json(raw) for key, raw in found.items()}

    async def _add(self, method: str, key: str, amount: int) -> int:
        try:
            result = await self._call(method, key, amount, noreply=False)
        except Exception as e:
            if _NON_NUMERIC_REPLY in str(e):
                raise CacheValueTypeError(key, "integer") from e
            raise
        if result is None:
            raise CacheKeyNotFoundError(key)
        return int(result)

    async def _increment(self, key: str, amount: int) -> int:
        return await self._add("incr", key, amount)

    async def _decrement(self, key: str, amount: int) -> int:
        return await self._add("decr", key, amount)

    async def _touch(self, key: str, lifetime: int) -> bool:
        return bool(await self._call("touch", key, expire=lifetime, noreply=False))
