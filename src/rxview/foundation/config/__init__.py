"""Configuration management using pydantic-settings."""

from .settings import (
    CacheSettings,
    CatalogSettings,
    LoggingSettings,
    OpenAISettings,
    RetrySettings,
    RxviewSettings,
    ServerSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CacheSettings",
    "CatalogSettings",
    "LoggingSettings",
    "OpenAISettings",
    "RetrySettings",
    "RxviewSettings",
    "ServerSettings",
    "clear_settings_cache",
    "get_settings",
]
