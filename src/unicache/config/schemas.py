"""
unicache — Configuration Schemas

Typed configuration models using Pydantic. A configuration is frozen once
built, so the factory can fingerprint it safely.

Field names are snake_case; the camelCase spellings used by existing
configuration files (``consistentBehavior``, ``enableTsl``, ``defaultTtl``)
are accepted as aliases.
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CacheEngine(str, Enum):
    """Supported cache engines."""

    REDIS = "redis"
    MEMCACHED = "memcached"
    NONE = "none"  # In-process memory


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CacheConfig(BaseModel):
    """Cache configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    engine: CacheEngine | None = Field(default=None, description="Cache engine to use")
    consistent_behavior: bool | int | str | None = Field(
        default=None,
        validation_alias=AliasChoices("consistent_behavior", "consistentBehavior"),
        description="Consistent-behavior flag (anything but an explicit false value means true)",
    )
    default_ttl: int = Field(
        default=86400,
        ge=0,
        validation_alias=AliasChoices("default_ttl", "defaultTtl"),
        description="TTL in seconds applied to every write (0 = no expiry)",
    )
    namespace: str = Field(default="", description="Data set name for the in-memory engine")

    # Redis-specific settings (only used when engine=redis)
    host: str | None = Field(default=None, description="Redis host")
    port: int | None = Field(default=None, ge=1, le=65535, description="Redis port")
    password: str | None = Field(default=None, description="Redis password (empty for no auth)")
    enable_tsl: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("enable_tsl", "enableTsl"),
        description="Connect to Redis over TLS",
    )
    redis_socket_timeout: float = Field(default=5.0, gt=0, description="Redis socket timeout in seconds")
    redis_retries: int = Field(default=1, ge=0, description="Redis retries on connection errors")

    # Memcached-specific settings (only used when engine=memcached)
    servers: list[str] | None = Field(default=None, description="Memcached servers as host:port")
    memcached_timeout: float = Field(default=0.5, gt=0, description="Memcached socket timeout in seconds")
    memcached_retries: int = Field(default=1, ge=0, description="Memcached attempts before a server is marked dead")
    memcached_retry_timeout: float = Field(
        default=1.0, gt=0, description="Seconds before a dead Memcached server is retried"
    )

    @field_validator("engine", mode="before")
    @classmethod
    def normalize_engine(cls, v: object) -> object:
        """Accept engine names in any letter case; treat blank as unset."""
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("servers", mode="before")
    @classmethod
    def split_servers(cls, v: object) -> object:
        """Allow a comma-separated server string."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v


class UnicacheConfig(BaseModel):
    """Root configuration for unicache."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    cache: CacheConfig | None = Field(default=None, description="Cache section")
