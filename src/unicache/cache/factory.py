"""
unicache — Cache Factory

Canonical way to obtain cache facades.

Key points:
- One facade per configuration fingerprint for the life of the process,
  so equal configurations never open a second connection
- The fingerprint is built from the engine, the normalized
  consistent-behavior flag and the engine's endpoint identity
- Mandatory connection fields are checked before anything is built;
  missing or empty fields raise ConfigurationError
- The registry has no reset or teardown; it is guarded by a lock so
  concurrent threads cannot register two facades for one fingerprint

Examples:
    from unicache import get_instance

    cache = get_instance({"cache": {"engine": "none", "namespace": "app"}})
    await cache.set("key", "value")
    result = await cache.get("key")
    result.value  # "value"

    # Uses the environment-loaded configuration
    cache = get_instance()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..config import CacheConfig, CacheEngine, UnicacheConfig, get_config
from ..errors import ConfigurationError
from .facade import CacheFacade

logger = logging.getLogger(__name__)

# Global facade registry: fingerprint -> facade
_instances: dict[str, CacheFacade] = {}
_instances_lock = threading.Lock()

_REDIS_MANDATORY_FIELDS = ("host", "port", "password", "enable_tsl")
_FALSE_VALUES = {"0", "false"}


def normalize_consistent_behavior(value: Any) -> bool:
    """
    Normalize the consistent-behavior flag.

    Unset means True. Only explicit false values (False, 0, "0", "false")
    turn it off; any other value means True.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_VALUES
    return value != 0


def _coerce_config(config: UnicacheConfig | Mapping[str, Any] | None) -> UnicacheConfig:
    if config is None:
        return get_config()
    if isinstance(config, UnicacheConfig):
        return config
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            "Configuration must be a UnicacheConfig or a mapping",
            details={"type": type(config).__name__},
        )
    try:
        return UnicacheConfig.model_validate(dict(config))
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            details={"validation_errors": e.errors()},
        ) from e


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list)) and len(value) == 0)


def _check_mandatory(cache: CacheConfig) -> None:
    """Raise ConfigurationError if engine-specific connection fields are missing or empty."""
    fields_set = cache.model_fields_set

    if cache.engine == CacheEngine.REDIS:
        for field in _REDIS_MANDATORY_FIELDS:
            if field not in fields_set:
                raise ConfigurationError(
                    "Redis - mandatory connection parameters missing.",
                    details={"engine": "redis", "field": field},
                )
            value = getattr(cache, field)
            # An empty password is a server without AUTH
            if value is None or (field != "password" and _is_empty(value)):
                raise ConfigurationError(
                    "Redis - connection parameters are empty.",
                    details={"engine": "redis", "field": field},
                )

    elif cache.engine == CacheEngine.MEMCACHED:
        if "servers" not in fields_set:
            raise ConfigurationError(
                "Memcached - mandatory connection parameters missing.",
                details={"engine": "memcached", "field": "servers"},
            )
        if _is_empty(cache.servers):
            raise ConfigurationError(
                "Memcached - servers parameter is empty.",
                details={"engine": "memcached", "field": "servers"},
            )


def compute_fingerprint(cache: CacheConfig) -> str:
    """
    Build the registry key for a cache configuration.

    Format: ``{engine}-{consistent}-{endpoint}`` where endpoint is
    ``host-port-tls`` for redis, the sorted server list for memcached and
    the namespace for the in-memory engine. Host names and servers are
    lower-cased.
    """
    if cache.engine is None:
        raise ConfigurationError("Cache engine parameter is empty.", details={"field": "engine"})

    consistent = str(normalize_consistent_behavior(cache.consistent_behavior)).lower()

    if cache.engine == CacheEngine.REDIS:
        endpoint = f"{(cache.host or '').lower()}-{cache.port}-{str(bool(cache.enable_tsl)).lower()}"
    elif cache.engine == CacheEngine.MEMCACHED:
        endpoint = ",".join(sorted(server.strip().lower() for server in cache.servers or []))
    else:
        endpoint = cache.namespace

    return f"{cache.engine.value}-{consistent}-{endpoint}"


def get_instance(config: UnicacheConfig | Mapping[str, Any] | None = None) -> CacheFacade:
    """
    Return the facade for a configuration, creating it on first request.

    Args:
        config: Configuration model or mapping with a ``cache`` section
            (uses the environment-loaded configuration if not provided)

    Returns:
        The facade registered for the configuration's fingerprint

    Raises:
        ConfigurationError: If the engine or a mandatory connection field
            is missing or empty, or the configuration fails validation
    """
    resolved = _coerce_config(config)

    cache = resolved.cache
    if cache is None or "engine" not in cache.model_fields_set:
        raise ConfigurationError("Cache engine parameter is missing.", details={"field": "engine"})
    if cache.engine is None:
        raise ConfigurationError("Cache engine parameter is empty.", details={"field": "engine"})

    _check_mandatory(cache)
    fingerprint = compute_fingerprint(cache)

    with _instances_lock:
        instance = _instances.get(fingerprint)
        if instance is not None:
            logger.debug("Returning existing cache instance: %s", fingerprint)
            return instance

        instance = CacheFacade(
            resolved,
            consistent_behavior=normalize_consistent_behavior(cache.consistent_behavior),
        )
        _instances[fingerprint] = instance

    logger.info(
        "Cache instance created for engine '%s'",
        cache.engine.value,
        extra={"fingerprint": fingerprint, "engine": cache.engine.value},
    )
    return instance


def list_instances() -> list[str]:
    """
    List the fingerprints of all registered facades.

    Returns:
        Registered fingerprints
    """
    with _instances_lock:
        return list(_instances.keys())
