"""Remote GraphQL source settings.

Controls where the upstream GraphQL endpoint lives and how the gateway
talks to it. Environment variables use REMOTE_ prefix.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RemoteSettings(BaseSettings):
    """Upstream GraphQL endpoint configuration.

    Environment variables use REMOTE_ prefix.
    Example: REMOTE_URL=http://dgraph:8080/graphql, REMOTE_TIMEOUT=10
    """

    url: str = Field(
        default="http://localhost:8080/graphql",
        min_length=1,
        pattern=r"^https?://.+$",
        description="Full URL of the remote GraphQL endpoint",
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Upstream request timeout in seconds",
    )

    # Connection pool
    max_connections: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum concurrent connections to the remote",
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=10000,
        description="Maximum idle keep-alive connections to the remote",
    )

    # Headers
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Static headers sent with every upstream request (JSON object)",
    )
    forward_headers: list[str] = Field(
        default_factory=lambda: ["authorization"],
        description="Incoming request headers copied onto the upstream request",
    )

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("forward_headers")
    @classmethod
    def _lowercase_forward_headers(cls, v: list[str]) -> list[str]:
        """Header names are matched case-insensitively."""
        return [name.strip().lower() for name in v if name.strip()]
