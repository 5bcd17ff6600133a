"""
unicache — Unified Cache Facade

One cache API over in-process memory, Redis and Memcached, with the same
validation and result shape whichever engine is configured.
"""

__version__ = "1.0.0"

from .cache import CacheAdapter, CacheFacade, CacheResult, get_instance  # noqa: E402
from .errors import ConfigurationError, ErrorCode  # noqa: E402
from .observability import configure_logging  # noqa: E402

__all__ = [
    "__version__",
    "get_instance",
    "CacheFacade",
    "CacheAdapter",
    "CacheResult",
    "ConfigurationError",
    "ErrorCode",
    "configure_logging",
]
