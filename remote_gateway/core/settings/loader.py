"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from remote_gateway.core.settings.loader import get_remote_settings

    settings = get_remote_settings()  # First call: loads and validates
    settings = get_remote_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_remote_settings.cache_clear()

    Or override with custom values:
    settings = RemoteSettings(url="http://remote.test/graphql")
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .graphql import GraphQLSettings
from .logs import LoggingSettings
from .remote import RemoteSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_remote_settings() -> RemoteSettings:
    """Get cached remote GraphQL source settings.

    Returns:
        Validated and frozen RemoteSettings instance.
    """
    return RemoteSettings()


@lru_cache(maxsize=1)
def get_graphql_settings() -> GraphQLSettings:
    """Get cached GraphQL endpoint settings.

    Returns:
        Validated and frozen GraphQLSettings instance.
    """
    return GraphQLSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear every cached settings instance (tests and hot reload)."""
    get_app_settings.cache_clear()
    get_remote_settings.cache_clear()
    get_graphql_settings.cache_clear()
    get_logging_settings.cache_clear()
