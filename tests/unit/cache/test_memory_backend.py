"""
unicache — Memory Cache Backend Tests

Test suite for the in-memory adapter: TTL handling, object isolation,
counters and the result envelope of every operation.
"""

import asyncio

import pytest

from unicache.cache.backends.memory import MemoryCacheAdapter
from unicache.errors import ErrorCode


class TestMemoryCacheAdapter:
    """Test suite for MemoryCacheAdapter."""

    @pytest.fixture
    def cache(self) -> MemoryCacheAdapter:
        """Create a fresh memory cache instance for each test."""
        return MemoryCacheAdapter(default_ttl=3600, namespace="test")

    async def test_initialization(self) -> None:
        """Test cache initialization with custom parameters."""
        cache = MemoryCacheAdapter(default_ttl=1800, namespace="custom")

        assert cache.default_ttl == 1800
        assert cache.namespace == "custom"
        assert cache.backend == "memory"
        assert cache.size() == 0

    async def test_negative_ttl_clamped(self) -> None:
        assert MemoryCacheAdapter(default_ttl=-5).default_ttl == 0

    async def test_set_get_delete_scenario(self, cache: MemoryCacheAdapter) -> None:
        """set → get → del → get, each result inspected."""
        result = await cache.set("k", "v")
        assert result.is_success() and result.value is True

        result = await cache.get("k")
        assert result.is_success() and result.value == "v"

        result = await cache.delete("k")
        assert result.is_success() and result.value is True

        result = await cache.get("k")
        assert result.is_success() and result.value is None

    async def test_delete_missing_key_succeeds(self, cache: MemoryCacheAdapter) -> None:
        result = await cache.delete("never-set")
        assert result.is_success() and result.value is True

    async def test_ttl_expiration(self) -> None:
        """Entries expire after the default TTL."""
        cache = MemoryCacheAdapter(default_ttl=1)

        await cache.set("key1", "value1")
        assert (await cache.get("key1")).value == "value1"

        await asyncio.sleep(1.1)

        assert (await cache.get("key1")).value is None
        assert cache.size() == 0

    async def test_ttl_zero_no_expiry(self) -> None:
        cache = MemoryCacheAdapter(default_ttl=0)

        await cache.set("key1", "value1")
        await asyncio.sleep(0.1)

        assert (await cache.get("key1")).value == "value1"

    async def test_touch_extends_lifetime(self) -> None:
        cache = MemoryCacheAdapter(default_ttl=1)
        await cache.set("key1", "value1")

        result = await cache.touch("key1", 60)
        assert result.is_success() and result.value is True

        await asyncio.sleep(1.1)
        assert (await cache.get("key1")).value == "value1"

    async def test_touch_missing_key(self, cache: MemoryCacheAdapter) -> None:
        result = await cache.touch("missing", 10)

        assert result.is_failure()
        assert result.error_code == "memory.touch.not_found"
        assert result.error_kind is ErrorCode.KEY_NOT_FOUND

    async def test_stored_object_is_isolated_from_caller(self, cache: MemoryCacheAdapter) -> None:
        """Mutating an object after set_object or get_object does not change the cache."""
        value = {"a": [1, 2]}
        await cache.set_object("obj", value)
        value["a"].append(3)

        fetched = (await cache.get_object("obj")).value
        assert fetched == {"a": [1, 2]}

        fetched["a"].append(99)
        assert (await cache.get_object("obj")).value == {"a": [1, 2]}

    async def test_get_on_object_entry_returns_none(self, cache: MemoryCacheAdapter) -> None:
        await cache.set_object("obj", {"a": 1})

        result = await cache.get("obj")
        assert result.is_success() and result.value is None

    async def test_get_object_on_scalar_entry_returns_none(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("scalar", "text")

        result = await cache.get_object("scalar")
        assert result.is_success() and result.value is None

    async def test_increment_and_decrement(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("counter", 10)

        assert (await cache.increment("counter")).value == 11
        assert (await cache.increment("counter", 5)).value == 16
        assert (await cache.decrement("counter", 20)).value == -4
        assert (await cache.get("counter")).value == -4

    async def test_increment_keeps_expiry(self) -> None:
        cache = MemoryCacheAdapter(default_ttl=1)
        await cache.set("counter", 1)
        await cache.increment("counter")

        await asyncio.sleep(1.1)
        assert (await cache.get("counter")).value is None

    async def test_increment_missing_key(self, cache: MemoryCacheAdapter) -> None:
        for _ in range(2):
            result = await cache.increment("missing")
            assert result.is_failure()
            assert result.error_code == "memory.increment.not_found"

        # Failed increments never create the key
        assert (await cache.get("missing")).value is None

    @pytest.mark.parametrize("value", ["10", 1.5, True])
    async def test_increment_non_integer(self, cache: MemoryCacheAdapter, value: object) -> None:
        await cache.set("not-int", value)

        result = await cache.increment("not-int")

        assert result.is_failure()
        assert result.error_code == "memory.increment.non_numeric"
        assert result.error_kind is ErrorCode.NON_NUMERIC_VALUE
        assert (await cache.get("not-int")).value == value

    async def test_decrement_object_entry(self, cache: MemoryCacheAdapter) -> None:
        await cache.set_object("obj", {"a": 1})

        result = await cache.decrement("obj")
        assert result.error_code == "memory.decrement.non_numeric"

    async def test_concurrent_increments(self, cache: MemoryCacheAdapter) -> None:
        """Increments issued concurrently are all applied."""
        await cache.set("counter", 0)

        await asyncio.gather(*(cache.increment("counter") for _ in range(50)))

        assert (await cache.get("counter")).value == 50

    async def test_overwrite_scalar_with_object(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("k", "v")
        await cache.set_object("k", {"a": 1})

        assert (await cache.get_object("k")).value == {"a": 1}
        assert (await cache.get("k")).value is None
