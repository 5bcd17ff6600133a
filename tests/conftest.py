"""
unicache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.

The facade registry is process-wide and never reset, so tests that go
through ``get_instance`` use a unique namespace (``unique_name``) rather
than relying on a clean registry.
"""

import os
import time
import uuid
from collections.abc import AsyncGenerator, Callable
from typing import Any

import fakeredis
import pytest
import pytest_asyncio

from unicache.cache.backends.memcached import MemcachedCacheAdapter
from unicache.cache.backends.memory import MemoryCacheAdapter
from unicache.cache.backends.redis import RedisCacheAdapter
from unicache.cache.interface import CacheAdapter

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"


class FakeMemcacheClient:
    """
    In-process stand-in for pymemcache's HashClient.

    Follows memcached semantics the adapter relies on: values come back as
    bytes, incr/decr need a decimal value and return None for absent keys,
    decr stops at zero, touch reports whether the key existed.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[bytes, float | None]] = {}
        self.calls: list[str] = []

    def _live(self, key: str) -> bytes | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expiry = item
        if expiry is not None and time.time() > expiry:
            del self._data[key]
            return None
        return value

    @staticmethod
    def _expiry(expire: int) -> float | None:
        return time.time() + expire if expire else None

    def get(self, key: str) -> bytes | None:
        self.calls.append("get")
        return self._live(key)

    def get_many(self, keys: list[str]) -> dict[str, bytes]:
        self.calls.append("get_many")
        found = {}
        for key in keys:
            value = self._live(key)
            if value is not None:
                found[key] = value
        return found

    def set(self, key: str, value: str | bytes, expire: int = 0, noreply: bool | None = None) -> bool:
        self.calls.append("set")
        data = value.encode("utf-8") if isinstance(value, str) else value
        self._data[key] = (data, self._expiry(expire))
        return True

    def delete(self, key: str, noreply: bool | None = None) -> bool:
        self.calls.append("delete")
        return self._data.pop(key, None) is not None

    def _add(self, key: str, delta: int) -> int | None:
        value = self._live(key)
        if value is None:
            return None
        if not value.isdigit():
            raise RuntimeError("b'cannot increment or decrement non-numeric value'")
        new_value = max(0, int(value) + delta)
        self._data[key] = (str(new_value).encode("ascii"), self._data[key][1])
        return new_value

    def incr(self, key: str, value: int, noreply: bool | None = False) -> int | None:
        self.calls.append("incr")
        return self._add(key, value)

    def decr(self, key: str, value: int, noreply: bool | None = False) -> int | None:
        self.calls.append("decr")
        return self._add(key, -value)

    def touch(self, key: str, expire: int = 0, noreply: bool | None = None) -> bool:
        self.calls.append("touch")
        if self._live(key) is None:
            return False
        value, _ = self._data[key]
        self._data[key] = (value, self._expiry(expire))
        return True


@pytest.fixture
def unique_name() -> str:
    """Unique suffix for keys and namespaces."""
    return uuid.uuid4().hex[:12]


@pytest_asyncio.fixture
async def fake_redis() -> AsyncGenerator[fakeredis.FakeAsyncRedis, None]:
    """FakeAsyncRedis client on a private in-process server."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def fake_memcache() -> FakeMemcacheClient:
    """Fresh fake memcached client."""
    return FakeMemcacheClient()


@pytest.fixture
def memory_adapter() -> MemoryCacheAdapter:
    return MemoryCacheAdapter(default_ttl=3600, namespace="test")


@pytest.fixture
def redis_adapter(fake_redis: fakeredis.FakeAsyncRedis) -> RedisCacheAdapter:
    return RedisCacheAdapter(default_ttl=3600, client=fake_redis)


@pytest.fixture
def memcached_adapter(fake_memcache: FakeMemcacheClient) -> MemcachedCacheAdapter:
    return MemcachedCacheAdapter(servers=["localhost:11211"], default_ttl=3600, client=fake_memcache)


@pytest.fixture(params=["memory", "redis", "memcached"])
def adapter(
    request: pytest.FixtureRequest,
    memory_adapter: MemoryCacheAdapter,
    redis_adapter: RedisCacheAdapter,
    memcached_adapter: MemcachedCacheAdapter,
) -> CacheAdapter:
    """Each engine adapter in turn."""
    adapters: dict[str, CacheAdapter] = {
        "memory": memory_adapter,
        "redis": redis_adapter,
        "memcached": memcached_adapter,
    }
    return adapters[request.param]


@pytest.fixture
def sample_objects() -> dict[str, Any]:
    """Sample structured values for object storage tests."""
    return {
        "flat": {"a": "a"},
        "complex": {"a": "a", "b": [12, 23], "c": True, "d": 1, "e": {"f": "hi", "g": 1}},
        "nulls": {"missing": None, "empty_list": [], "empty_dict": {}},
        "list": [1, "two", {"three": 3}, [4]],
        "empty_dict": {},
        "empty_list": [],
    }


@pytest.fixture
def make_key(unique_name: str) -> Callable[[str], str]:
    """Build keys unique to the current test."""
    return lambda prefix: f"{prefix}-{unique_name}"
