"""FastAPI application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from remote_gateway.app.exception_handlers import configure_exception_handlers
from remote_gateway.app.lifespan import lifespan
from remote_gateway.core.settings import get_app_settings, get_graphql_settings
from remote_gateway.features.graphql.router import create_graphql_router
from remote_gateway.infra.metrics.prometheus import REGISTRY

if TYPE_CHECKING:
    from graphql import GraphQLSchema


def create_app(schema: GraphQLSchema | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        schema: Executable schema to serve, resolvers already bound. When
            omitted, the lifespan introspects the remote endpoint and binds
            coalescing resolvers itself.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()
    graphql_settings = get_graphql_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.graphql_schema = schema

    configure_exception_handlers(app)

    if graphql_settings.is_configured:
        app.include_router(create_graphql_router(graphql_settings.path))

    if graphql_settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app(registry=REGISTRY))

    return app
