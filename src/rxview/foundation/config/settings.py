"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from rxview.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.cache.content_ttl
    3600
    >>> settings.openai.enabled
    False

    # Or with environment variables:
    # RXVIEW_OPENAI_API_KEY=sk-...
    # RXVIEW_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import (
    Field,
    NonNegativeFloat,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAISettings(BaseSettings):
    """Model provider configuration. No key means AI features are disabled."""

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_OPENAI_",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, description="Provider API key")
    base_url: str | None = Field(default=None, description="Override for OpenAI-compatible endpoints")
    model: str = "gpt-4.1-nano"
    timeout: PositiveFloat = Field(default=30.0, description="Per-request timeout in seconds")

    seo_temperature: Annotated[float, Field(ge=0.0, le=2.0)] = 0.7
    seo_max_tokens: PositiveInt = 200
    summary_temperature: Annotated[float, Field(ge=0.0, le=2.0)] = 0.6
    summary_max_tokens: PositiveInt = 150
    sections_temperature: Annotated[float, Field(ge=0.0, le=2.0)] = 0.4

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_is_missing(cls, v: object) -> object:
        """Treat an empty key as unset."""
        return None if isinstance(v, str) and not v.strip() else v

    @computed_field
    @property
    def enabled(self) -> bool:
        """Whether generation calls are attempted at all."""
        return self.api_key is not None


class CacheSettings(BaseSettings):
    """Content cache configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_CACHE_",
        extra="ignore",
    )

    redis_url: SecretStr | None = Field(default=None, description="Redis URL for a shared cache")
    key_prefix: str = "rxview:"
    content_ttl: PositiveInt = Field(default=3600, description="TTL of assembled enhanced content")
    generation_ttl: PositiveInt = Field(default=86400, description="TTL of SEO, summary and section generations")
    max_entries: PositiveInt = Field(default=5000, description="Max entries for the in-memory backend")

    @computed_field
    @property
    def backend(self) -> Literal["memory", "redis"]:
        """Determine cache backend from configuration."""
        return "redis" if self.redis_url else "memory"


class RetrySettings(BaseSettings):
    """Retry configuration for model calls."""

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_RETRY_",
        extra="ignore",
    )

    max_attempts: Annotated[int, Field(ge=1, le=10)] = 3
    base_delay: PositiveFloat = Field(default=1.0, description="Rate-limit backoff base in seconds")
    transient_delay: NonNegativeFloat = Field(default=0.5, description="Fixed delay after other failures")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class CatalogSettings(BaseSettings):
    """Drug record source."""

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_CATALOG_",
        extra="ignore",
    )

    labels_path: Path = Field(default=Path("admin/Labels.json"), description="JSON dump of drug labels")


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_SERVER_",
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: Annotated[int, Field(ge=1, le=65535)] = 8000


class RxviewSettings(BaseSettings):
    """Root settings.

    Loads configuration from environment variables with RXVIEW_ prefix.

    Example environment variables:
        RXVIEW_OPENAI_API_KEY=sk-...
        RXVIEW_CACHE_REDIS_URL=redis://localhost:6379/0
        RXVIEW_RETRY_MAX_ATTEMPTS=3
        RXVIEW_LOG_FORMAT=json
        RXVIEW_CATALOG_LABELS_PATH=data/Labels.json
    """

    model_config = SettingsConfigDict(
        env_prefix="RXVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    environment: Literal["development", "staging", "production"] = "development"

    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        """Normalize environment name to lowercase."""
        return v.lower() if isinstance(v, str) else v

    @computed_field
    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> RxviewSettings:
    """Get the process settings (cached)."""
    return RxviewSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
