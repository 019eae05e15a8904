"""
Shared configuration management for the Vehicles access layer.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings.

    Every field can be overridden with a ``VEHICLES_`` prefixed environment
    variable, e.g. ``VEHICLES_REDIS_URL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="VEHICLES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Cache backend
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_socket_timeout: float = Field(default=5.0, gt=0)
    redis_default_ttl_seconds: Optional[int] = Field(default=None, gt=0)

    # Durable store
    postgres_dsn: str = Field(default="postgres://localhost:5432/fleet")
    postgres_min_pool_size: int = Field(default=2, ge=1)
    postgres_max_pool_size: int = Field(default=10, ge=1)
    postgres_command_timeout: float = Field(default=30.0, gt=0)

    # Collection snapshot policy
    cache_key: str = Field(default="vehicles-cache", min_length=1)
    cache_ttl_seconds: int = Field(default=1200, gt=0)  # 20 minutes


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
