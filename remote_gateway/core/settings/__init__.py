"""Modular Pydantic Settings v2 configuration.

One settings model per domain, each read from environment variables
(or a local .env file) and cached by its loader:

    from remote_gateway.core.settings import get_remote_settings

    settings = get_remote_settings()
    print(settings.url)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .graphql import GraphQLSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_graphql_settings,
    get_logging_settings,
    get_remote_settings,
)
from .logs import LoggingSettings
from .remote import RemoteSettings

__all__ = [
    "AppSettings",
    "GraphQLSettings",
    "LoggingSettings",
    "RemoteSettings",
    "clear_all_caches",
    "get_app_settings",
    "get_graphql_settings",
    "get_logging_settings",
    "get_remote_settings",
]
