"""
unicache — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import CacheConfig, CacheEngine, LogLevel, UnicacheConfig

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "UnicacheConfig",
    # Enums
    "CacheEngine",
    "LogLevel",
    # Config sections
    "CacheConfig",
]
