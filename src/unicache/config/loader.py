"""
unicache — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the process.

Environment variables:
    CACHE_ENGINE                redis | memcached | none
    CACHE_CONSISTENT_BEHAVIOR   "0" to turn the flag off
    CACHE_NAMESPACE             data set name for the in-memory engine
    CACHE_DEFAULT_TTL           default TTL in seconds
    REDIS_HOST, REDIS_PORT, REDIS_PASS, REDIS_TLS_ENABLED
    MEMCACHE_SERVERS            comma-separated host:port list
    LOG_LEVEL

Variables that are not set are left out of the cache section, so the
factory's presence checks see them as missing.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import UnicacheConfig

logger = logging.getLogger(__name__)

_config_instance: UnicacheConfig | None = None

# Environment variable -> cache section field
_CACHE_ENV_VARS = {
    "CACHE_ENGINE": "engine",
    "CACHE_CONSISTENT_BEHAVIOR": "consistent_behavior",
    "CACHE_NAMESPACE": "namespace",
    "CACHE_DEFAULT_TTL": "default_ttl",
    "REDIS_HOST": "host",
    "REDIS_PORT": "port",
    "REDIS_PASS": "password",
    "REDIS_TLS_ENABLED": "enable_tsl",
    "MEMCACHE_SERVERS": "servers",
}


def _cache_section_from_env() -> dict[str, Any]:
    section: dict[str, Any] = {}
    for env_var, field in _CACHE_ENV_VARS.items():
        value = os.getenv(env_var)
        if value is not None:
            section[field] = value
    return section


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> UnicacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated UnicacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    config_dict: dict[str, Any] = {
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "cache": _cache_section_from_env(),
    }

    try:
        _config_instance = UnicacheConfig(**config_dict)
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors()},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables.",
            details={"validation_errors": e.errors()},
        ) from e

    engine = _config_instance.cache.engine if _config_instance.cache else None
    logger.info(
        "Configuration loaded (cache engine: %s)",
        engine.value if engine else "unset",
        extra={"cache_engine": engine.value if engine else None},
    )
    return _config_instance


def get_config() -> UnicacheConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current UnicacheConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> UnicacheConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded UnicacheConfig instance
    """
    return load_config(env_file=env_file, reload=True)
