"""
Shared configuration management for the Pokedex Access Layer.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="POKEDEX_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Upstream catalog
    upstream_base_url: str = Field(default="https://pokeapi.co/api/v2")
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)
    index_load_limit: int = Field(default=10000, ge=1)

    # Detail retry policy
    detail_retry_attempts: int = Field(default=2, ge=0)
    detail_retry_base_delay: float = Field(default=0.5, ge=0)
    detail_retry_max_delay: float = Field(default=5.0, ge=0)
    retry_jitter: bool = Field(default=False)

    # Hydration and paging
    hydration_concurrency: int = Field(default=20, ge=1)
    default_page_size: int = Field(default=20, ge=0)
    max_page_size: int = Field(default=100, ge=1)
    search_result_limit: int = Field(default=10, ge=1)
    sprite_url_template: str = Field(
        default="https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/{id}.png"
    )


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
