"""GraphQL context for request-scoped state.

The context is created fresh for each GraphQL request and is the
execution store of the remote coalescing: the ``remote_execution`` slot
holds the one ``RemoteExecution`` of that request, so every remote field
of the request shares one upstream fetch and no two requests ever do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request

    from remote_gateway.features.graphql.remote import RemoteExecution


@dataclass
class GraphQLContext:
    """Request context for GraphQL operations.

    Fields:
    - request: The incoming HTTP request (None outside HTTP)
    - correlation_id: For distributed tracing
    - remote_execution: Coalescing slot, filled by the first remote field

    Example usage in a fetcher:
        async def fetch(request: RemoteRequest) -> dict:
            ctx: GraphQLContext = request.context
            headers = {"x-correlation-id": ctx.correlation_id or ""}
            ...
    """

    request: Request | None = None
    correlation_id: str | None = None
    remote_execution: RemoteExecution | None = None


__all__ = ["GraphQLContext"]
