"""
unicache — Redis Cache Backend

Asynchronous Redis adapter for the ``redis`` engine:
- Scalars stored as UTF-8 JSON strings with SET ... EX
- Objects stored as hashes, each field JSON-encoded on its own
- Multi-get through a single MGET (hash entries come back as nil)
- Increment/decrement through a Lua script so absent keys are not created

Requires: redis>=5.0 with asyncio support

Example:
    cache = RedisCacheAdapter(host="localhost", port=6379, password="", enable_tls=False)
    await cache.set_object("greeting", {"msg": "hello"})
    result = await cache.get_object("greeting")
"""

from __future__ import annotations

import logging
from typing import Any

from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ...errors import CacheKeyNotFoundError, CacheValueTypeError
from ..codec import from_json, to_json
from ..interface import CacheAdapter

logger = logging.getLogger(__name__)

# Hash field recording whether an object was a dict or a list.
SHAPE_FIELD = "\x00shape"

# Adds ARGV[1] to KEYS[1] only when the key exists; returns nil otherwise.
INCR_IF_EXISTS_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return redis.call('INCRBY', KEYS[1], ARGV[1])
end
return false
"""


def _is_wrong_type(error: ResponseError) -> bool:
    return "WRONGTYPE" in str(error)


def _is_not_integer(error: ResponseError) -> bool:
    message = str(error).lower()
    return "not an integer" in message or "wrongtype" in message


class RedisCacheAdapter(CacheAdapter):
    """
    Redis cache adapter with JSON serialization and TTL.

    Notes:
    - Keys are used as given (already validated to 250 bytes, no whitespace).
    - TTL is applied via Redis EX seconds (0 -> no expiry).
    - Reading a key with the wrong Redis type (a hash through ``get`` or a
      string through ``get_object``) yields None rather than an error.
    """

    backend = "redis"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        enable_tls: bool = False,
        default_ttl: int = 86400,
        socket_timeout: float = 5.0,
        retries: int = 1,
        client: Redis | None = None,
    ) -> None:
        """
        Initialize Redis cache adapter.

        Args:
            host: Redis server host
            port: Redis server port
            password: AUTH password (empty or None for no auth)
            enable_tls: Connect over TLS
            default_ttl: Default TTL in seconds (0 => no expiry)
            socket_timeout: Socket timeout in seconds
            retries: Retries on connection errors and timeouts
            client: Pre-built client (tests); other connection args are ignored
        """
        super().__init__(default_ttl=default_ttl)
        self.host = host
        self.port = int(port)
        self.enable_tls = bool(enable_tls)

        if client is None:
            # Lazy connection; connects on first command
            client = Redis(
                host=host,
                port=self.port,
                password=password or None,
                ssl=self.enable_tls,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
                retry=Retry(ExponentialBackoff(), retries),
                decode_responses=True,
            )
        self._client = client
        self._incr_script = self._client.register_script(INCR_IF_EXISTS_SCRIPT)
        logger.debug(
            f"Redis cache adapter ready for {self.host}:{self.port}",
            extra={"host": self.host, "port": self.port, "tls": self.enable_tls},
        )

    # ------------ Helpers ------------

    @staticmethod
    def _escape_field(field: str) -> str:
        # User fields starting with NUL get one more, so only SHAPE_FIELD has a single leading NUL
        return "\x00" + field if field.startswith("\x00") else field

    @staticmethod
    def _unescape_field(field: str) -> str:
        return field[1:] if field.startswith("\x00\x00") else field

    @classmethod
    def _encode_hash(cls, value: dict[str, Any] | list[Any]) -> dict[str, str]:
        """Encode an object field-wise for HSET."""
        if isinstance(value, list):
            mapping = {str(index): to_json(item) for index, item in enumerate(value)}
            mapping[SHAPE_FIELD] = "list"
        else:
            mapping = {cls._escape_field(field): to_json(item) for field, item in value.items()}
            mapping[SHAPE_FIELD] = "dict"
        return mapping

    @classmethod
    def _decode_hash(cls, fields: dict[str, str]) -> dict[str, Any] | list[Any]:
        """Decode an HGETALL reply field-wise."""
        fields = dict(fields)
        shape = fields.pop(SHAPE_FIELD, "dict")
        if shape == "list":
            return [from_json(fields[str(index)]) for index in range(len(fields))]
        return {cls._unescape_field(field): from_json(raw) for field, raw in fields.items()}

    def _is_connectivity_error(self, error: Exception) -> bool:
        return isinstance(error, (RedisConnectionError, RedisTimeoutError, ConnectionError, TimeoutError))

    # ------------ Primitives ------------

    async def _get(self, key: str) -> Any | None:
        try:
            data = await self._client.get(key)
        except ResponseError as e:
            if _is_wrong_type(e):
                return None
            raise
        return from_json(data)

    async def _get_object(self, key: str) -> Any | None:
        try:
            fields = await self._client.hgetall(key)
        except ResponseError as e:
            if _is_wrong_type(e):
                return None
            raise
        if not fields:
            return None
        return self._decode_hash(fields)

    async def _set(self, key: str, value: Any, ttl: int) -> None:
        await self._client.set(name=key, value=to_json(value), ex=ttl or None)

    async def _set_object(self, key: str, value: dict[str, Any] | list[Any], ttl: int) -> None:
        # Replace any previous entry so stale fields do not survive
        pipe = self._client.pipeline(transaction=True)
        pipe.delete(key)
        pipe.hset(key, mapping=self._encode_hash(value))
        if ttl:
            pipe.expire(key, ttl)
        await pipe.execute()

    async def _delete(self, key: str) -> None:
        await self._client.delete(key)

    async def _multi_get(self, keys: list[str]) -> dict[str, Any]:
        values = await self._client.mget(keys)
        # mget preserves order; non-string entries come back as None
        return {key: from_json(raw) for key, raw in zip(keys, values, strict=True) if raw is not None}

    async def _add(self, key: str, amount: int) -> int:
        try:
            result = await self._incr_script(keys=[key], args=[amount])
        except ResponseError as e:
            if _is_not_integer(e):
                raise CacheValueTypeError(key, "integer") from e
            raise
        if result is None:
            raise CacheKeyNotFoundError(key)
        return int(result)

    async def _increment(self, key: str, amount: int) -> int:
        return await self._add(key, amount)

    async def _decrement(self, key: str, amount: int) -> int:
        return await self._add(key, -amount)

    async def _touch(self, key: str, lifetime: int) -> bool:
        return bool(await self._client.expire(key, lifetime))
