"""
unicache — Cache Module

Unified cache facade over interchangeable engines.

- factory.py: Single source of truth for facade creation
- facade.py: Caller-facing object delegating to one adapter
- interface.py: Operation contract and normalization shared by all engines
- validation.py: Key and value checks
- backends/: Engine adapters (memory always, redis and memcached lazy)

Usage:
    from unicache.cache import get_instance

    cache = get_instance({"cache": {"engine": "none"}})
    result = await cache.set("key", "value")
    result = await cache.get("key")
"""

from .facade import CacheFacade
from .factory import compute_fingerprint, get_instance, list_instances, normalize_consistent_behavior
from .interface import CacheAdapter
from .response import CacheResult

__all__ = [
    # Factory functions
    "get_instance",
    "list_instances",
    "compute_fingerprint",
    "normalize_consistent_behavior",
    # Types
    "CacheFacade",
    "CacheAdapter",
    "CacheResult",
]
