"""
unicache — Cache Facade

The object handed to callers by the factory. It owns one adapter, chosen
from the configured engine on first use, and forwards every operation to
it unchanged.
"""

import threading
from collections.abc import Sequence
from typing import Any

from .. import __version__
from ..config import CacheConfig, CacheEngine, UnicacheConfig
from .engines import create_adapter
from .interface import CacheAdapter
from .response import CacheResult


class CacheFacade:
    """
    Caller-facing cache object.

    Obtain instances through ``unicache.get_instance`` so that equal
    configurations share one facade (and one connection).
    """

    version = __version__

    def __init__(self, config: UnicacheConfig, consistent_behavior: bool = True):
        """
        Args:
            config: Validated configuration with a cache section
            consistent_behavior: Normalized consistent-behavior flag
        """
        self._config = config
        self._consistent_behavior = consistent_behavior
        self._adapter: CacheAdapter | None = None
        self._adapter_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"CacheFacade(engine={self.engine.value!r})"

    @property
    def config(self) -> UnicacheConfig:
        return self._config

    @property
    def cache_config(self) -> CacheConfig:
        assert self._config.cache is not None
        return self._config.cache

    @property
    def engine(self) -> CacheEngine:
        assert self.cache_config.engine is not None
        return self.cache_config.engine

    @property
    def consistent_behavior(self) -> bool:
        return self._consistent_behavior

    @property
    def cache_instance(self) -> CacheAdapter:
        """Adapter for the configured engine, built once on first access."""
        adapter = self._adapter
        if adapter is None:
            with self._adapter_lock:
                adapter = self._adapter
                if adapter is None:
                    adapter = create_adapter(self.cache_config)
                    self._adapter = adapter
        return adapter

    async def get(self, key: str) -> CacheResult:
        return await self.cache_instance.get(key)

    async def get_object(self, key: str) -> CacheResult:
        return await self.cache_instance.get_object(key)

    async def set(self, key: str, value: Any) -> CacheResult:
        return await self.cache_instance.set(key, value)

    async def set_object(self, key: str, value: dict[str, Any] | list[Any]) -> CacheResult:
        return await self.cache_instance.set_object(key, value)

    async def delete(self, key: str) -> CacheResult:
        return await self.cache_instance.delete(key)

    async def multi_get(self, keys: Sequence[str]) -> CacheResult:
        return await self.cache_instance.multi_get(keys)

    async def increment(self, key: str, by_value: int = 1) -> CacheResult:
        return await self.cache_instance.increment(key, by_value)

    async def decrement(self, key: str, by_value: int = 1) -> CacheResult:
        return await self.cache_instance.decrement(key, by_value)

    async def touch(self, key: str, lifetime: int) -> CacheResult:
        return await self.cache_instance.touch(key, lifetime)
