"""HTTP client for the remote GraphQL source.

An instance is a fetcher: ``await client(request)`` sends one
``RemoteRequest`` to the remote endpoint and returns the decoded result,
so it can be handed straight to ``build_remote_resolvers``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit, urlunsplit

from graphql import build_client_schema, get_introspection_query, print_ast

from remote_gateway.core.exceptions import RemoteFetchError

from .base_client import BaseHTTPClient

if TYPE_CHECKING:
    import httpx
    from graphql import GraphQLSchema

    from remote_gateway.core.settings.remote import RemoteSettings
    from remote_gateway.features.graphql.projection import RemoteRequest

logger = logging.getLogger(__name__)


class RemoteGraphQLClient(BaseHTTPClient):
    """Client for a remote GraphQL endpoint.

    Forwards selected headers of the incoming HTTP request (found on the
    execution context's ``request``) and the context's correlation ID.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        forward_headers: Iterable[str] = ("authorization",),
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize remote GraphQL client.

        Args:
            url: Full URL of the remote GraphQL endpoint.
            timeout: Request timeout in seconds.
            headers: Static headers sent with every request.
            forward_headers: Incoming request headers copied upstream.
            max_connections: Connection pool size.
            max_keepalive_connections: Idle connections kept open.
            transport: Optional transport override (tests use httpx.MockTransport).
        """
        parts = urlsplit(url)
        super().__init__(
            base_url=f"{parts.scheme}://{parts.netloc}",
            timeout=timeout,
            headers=headers,
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
            transport=transport,
        )
        self.url = url
        self.path = urlunsplit(("", "", parts.path or "/", parts.query, ""))
        self.forward_headers = tuple(name.lower() for name in forward_headers)

    @classmethod
    def from_settings(
        cls,
        settings: RemoteSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RemoteGraphQLClient:
        """Build a client from ``RemoteSettings`` (loaded from the environment by default)."""
        if settings is None:
            from remote_gateway.core.settings import get_remote_settings

            settings = get_remote_settings()

        return cls(
            url=settings.url,
            timeout=settings.timeout,
            headers=dict(settings.headers),
            forward_headers=settings.forward_headers,
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive_connections,
            transport=transport,
        )

    async def __call__(self, request: RemoteRequest) -> dict[str, Any]:
        """Send one captured operation upstream."""
        return await self.execute(
            print_ast(request.document),
            variables=request.variables,
            operation_name=request.operation_name,
            headers=self._context_headers(request.context),
        )

    async def execute(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        operation_name: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST a GraphQL document and return the result payload.

        Raises:
            RemoteFetchError: On transport/HTTP failures, on a body that is
                not a GraphQL result, or on errors without any data.
        """
        payload: dict[str, Any] = {"query": query, "variables": dict(variables or {})}
        if operation_name:
            payload["operationName"] = operation_name

        body = await self.post(self.path, json=payload, headers=headers)
        return self._check_result(body)

    async def fetch_schema(self) -> GraphQLSchema:
        """Introspect the remote endpoint and build its client schema."""
        result = await self.execute(get_introspection_query(descriptions=True))
        schema = build_client_schema(result["data"])
        logger.info(
            "Loaded remote schema",
            extra={"url": self.url, "types": len(schema.type_map)},
        )
        return schema

    def _context_headers(self, context: Any) -> dict[str, str]:
        if isinstance(context, Mapping):
            incoming = context.get("request")
            correlation_id = context.get("correlation_id")
        else:
            incoming = getattr(context, "request", None)
            correlation_id = getattr(context, "correlation_id", None)

        headers: dict[str, str] = {}
        incoming_headers = getattr(incoming, "headers", None)
        if incoming_headers is not None:
            for name in self.forward_headers:
                value = incoming_headers.get(name)
                if value is not None:
                    headers[name] = value
        if correlation_id:
            headers["x-correlation-id"] = correlation_id
        return headers

    def _check_result(self, body: Any) -> dict[str, Any]:
        if not isinstance(body, dict) or ("data" not in body and "errors" not in body):
            msg = "Remote response is not a GraphQL result"
            raise RemoteFetchError(msg, instance=self.url)

        errors = body.get("errors")
        if errors and body.get("data") is None:
            first = errors[0].get("message", "unknown error") if isinstance(errors[0], dict) else errors[0]
            msg = f"Remote GraphQL error: {first}"
            raise RemoteFetchError(msg, errors=errors, instance=self.url)

        if errors:
            logger.warning(
                "Remote returned partial data with errors",
                extra={"url": self.url, "error_count": len(errors)},
            )
        return body


__all__ = ["RemoteGraphQLClient"]
