"""
unicache — Engine Resolution

Maps a configured engine name to its adapter. Network adapters are
imported lazily so the in-memory engine works without their drivers.
"""

from __future__ import annotations

import logging

from ..config import CacheConfig, CacheEngine
from ..errors import ConfigurationError
from .backends.memory import MemoryCacheAdapter
from .interface import CacheAdapter

logger = logging.getLogger(__name__)


def _create_memory_adapter(config: CacheConfig) -> CacheAdapter:
    """Internal helper to construct the in-memory adapter."""
    return MemoryCacheAdapter(
        default_ttl=config.default_ttl,
        namespace=config.namespace,
    )


def _create_redis_adapter(config: CacheConfig) -> CacheAdapter:
    """Internal helper to construct the redis adapter with lazy import."""
    try:
        from .backends.redis import RedisCacheAdapter
    except ImportError as e:
        logger.error(
            "Redis engine selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis engine selected but redis client is unavailable. Install with: pip install 'redis>=5.0.0'",
            details={"package": "redis>=5.0.0", "error": str(e), "engine": "redis"},
        ) from e

    return RedisCacheAdapter(
        host=config.host or "",
        port=config.port or 6379,
        password=config.password,
        enable_tls=bool(config.enable_tsl),
        default_ttl=config.default_ttl,
        socket_timeout=config.redis_socket_timeout,
        retries=config.redis_retries,
    )


def _create_memcached_adapter(config: CacheConfig) -> CacheAdapter:
    """Internal helper to construct the memcached adapter; pymemcache is optional."""
    from .backends.memcached import MemcachedCacheAdapter

    try:
        return MemcachedCacheAdapter(
            servers=list(config.servers or []),
            default_ttl=config.default_ttl,
            timeout=config.memcached_timeout,
            retries=config.memcached_retries,
            retry_timeout=config.memcached_retry_timeout,
        )
    except ImportError as e:
        logger.error(
            "Memcached engine selected but pymemcache is not installed",
            extra={"package": "pymemcache>=4.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Memcached engine selected but pymemcache is unavailable. "
            "Install with: pip install 'unicache[memcached]'",
            details={"package": "pymemcache>=4.0.0", "error": str(e), "engine": "memcached"},
        ) from e


def create_adapter(config: CacheConfig) -> CacheAdapter:
    """
    Create the adapter matching ``config.engine``.

    Args:
        config: Validated cache configuration

    Returns:
        Adapter for the configured engine

    Raises:
        ConfigurationError: If the engine is unknown or its driver is unavailable
    """
    if config.engine == CacheEngine.NONE:
        adapter = _create_memory_adapter(config)
    elif config.engine == CacheEngine.REDIS:
        adapter = _create_redis_adapter(config)
    elif config.engine == CacheEngine.MEMCACHED:
        adapter = _create_memcached_adapter(config)
    else:
        raise ConfigurationError(
            f"Unknown cache engine: {config.engine}",
            details={"engine": str(config.engine), "supported": [e.value for e in CacheEngine]},
        )

    logger.info(
        "Cache adapter created for engine '%s'",
        config.engine.value,
        extra={"engine": config.engine.value, "adapter": type(adapter).__name__},
    )
    return adapter
