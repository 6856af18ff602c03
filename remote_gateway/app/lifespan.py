"""Application lifespan management.

Startup:
1. Logging
2. Remote schema: when no schema was given to ``create_app``, introspect
   the remote endpoint and bind coalescing resolvers that fetch through
   ``RemoteGraphQLClient``

Shutdown, or a failed startup, closes the remote client.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from remote_gateway.core.settings import get_graphql_settings
from remote_gateway.features.graphql.resolvers import bind_resolvers, build_remote_resolvers
from remote_gateway.infra.external.remote_graphql import RemoteGraphQLClient
from remote_gateway.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the remote schema on startup and release the client on shutdown."""
    setup_logging()

    client: RemoteGraphQLClient | None = None
    graphql_settings = get_graphql_settings()
    try:
        if graphql_settings.is_configured and getattr(app.state, "graphql_schema", None) is None:
            client = RemoteGraphQLClient.from_settings()
            schema = await client.fetch_schema()
            bind_resolvers(schema, build_remote_resolvers(schema, client))
            app.state.graphql_schema = schema
            app.state.remote_client = client
            logger.info("Remote GraphQL schema bound", extra={"url": client.url})

        yield
    finally:
        if client is not None:
            await client.close()
            logger.info("Remote GraphQL client closed")
