"""Remote GraphQL feature.

Resolves the root fields of a remote GraphQL source with one upstream
request per operation:

    from remote_gateway.features.graphql import bind_resolvers, build_remote_resolvers

    resolvers = build_remote_resolvers(remote_schema, fetcher)
    bind_resolvers(remote_schema, resolvers)
"""

from __future__ import annotations

from remote_gateway.features.graphql.context import GraphQLContext
from remote_gateway.features.graphql.projection import (
    RemoteRequest,
    capture_request,
    project_field,
)
from remote_gateway.features.graphql.remote import (
    STORE_SLOT,
    RemoteExecution,
    default_store,
    get_remote_execution,
)
from remote_gateway.features.graphql.resolvers import bind_resolvers, build_remote_resolvers
from remote_gateway.features.graphql.transforms import FilterToSchema, RequestTransform

__all__ = [
    "STORE_SLOT",
    "FilterToSchema",
    "GraphQLContext",
    "RemoteExecution",
    "RemoteRequest",
    "RequestTransform",
    "bind_resolvers",
    "build_remote_resolvers",
    "capture_request",
    "default_store",
    "get_remote_execution",
    "project_field",
]
