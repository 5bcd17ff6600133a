"""
unicache — Cache Result Tests
"""

from unicache.cache.response import CacheResult
from unicache.errors import ErrorCode


class TestCacheResult:
    """Tests for the result envelope."""

    def test_ok(self) -> None:
        result = CacheResult.ok("v")

        assert result.is_success() is True
        assert result.is_failure() is False
        assert result.value == "v"
        assert result.data == {"response": "v"}
        assert result.error_code is None

    def test_ok_with_none_payload(self) -> None:
        result = CacheResult.ok(None)

        assert result.is_success() is True
        assert result.value is None

    def test_fail(self) -> None:
        result = CacheResult.fail(
            "memory.get.invalid_key",
            ErrorCode.INVALID_KEY,
            "Cache key validation failed",
        )

        assert result.is_success() is False
        assert result.value is None
        assert result.error_code == "memory.get.invalid_key"
        assert result.error_kind is ErrorCode.INVALID_KEY
        assert result.details == {}

    def test_to_dict(self) -> None:
        assert CacheResult.ok(True).to_dict() == {"success": True, "data": {"response": True}}

        failed = CacheResult.fail("redis.set.transport_error", ErrorCode.CACHE_FAILURE, "down", {"key": "k"})
        assert failed.to_dict() == {
            "success": False,
            "error_code": "redis.set.transport_error",
            "error_kind": "CACHE_FAILURE",
            "message": "down",
            "details": {"key": "k"},
        }
