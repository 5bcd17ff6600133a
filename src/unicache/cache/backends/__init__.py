"""
unicache — Cache Backends

Exports the always-available in-memory adapter.

Redis and Memcached adapters are lazy-loaded via engines.py so their
drivers are only imported when selected.
"""

from .memory import MemoryCacheAdapter

__all__ = [
    "MemoryCacheAdapter",
]
