"""Resolver map for the remote source's root fields.

``build_remote_resolvers`` maps every query and mutation field of a schema
to one coalescing resolver, and ``bind_resolvers`` attaches such a map to
a ``graphql-core`` schema.

Example:
    >>> remote_schema = build_schema(sdl)
    >>> resolvers = build_remote_resolvers(remote_schema, client)
    >>> bind_resolvers(remote_schema, resolvers)
    >>> await graphql(remote_schema, "{ hello }", context_value={})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphql import GraphQLObjectType

from remote_gateway.core.exceptions import ResolverBindingError, SchemaRootError
from remote_gateway.features.graphql.remote import RemoteExecution, default_store
from remote_gateway.features.graphql.transforms import FilterToSchema

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graphql import GraphQLFieldResolver, GraphQLSchema

    from remote_gateway.features.graphql.remote import ExecutionStoreGetter, Fetcher
    from remote_gateway.features.graphql.transforms import RequestTransform

logger = logging.getLogger(__name__)

__all__ = ["Resolvers", "bind_resolvers", "build_remote_resolvers"]

Resolvers = dict[str, dict[str, "GraphQLFieldResolver"]]


def build_remote_resolvers(
    schema: GraphQLSchema,
    fetcher: Fetcher,
    *,
    get_store: ExecutionStoreGetter = default_store,
    transform: RequestTransform | None = None,
) -> Resolvers:
    """Map every root query/mutation field of ``schema`` to the remote resolver.

    All fields share one resolver, so all remote fields of an execution are
    answered by a single call to ``fetcher``.

    Args:
        schema: Schema of the remote source.
        fetcher: Sends a ``RemoteRequest`` upstream; may return the response
            or an awaitable of it.
        get_store: Maps the execution context to the execution store.
        transform: Request rewrite applied before fetching. Defaults to
            ``FilterToSchema(schema)``.

    Returns:
        ``{RootTypeName: {field_name: resolver}}`` for the query root and,
        if the schema has one, the mutation root.

    Raises:
        SchemaRootError: If the schema has no query root.
    """
    query_type = schema.query_type
    if query_type is None:
        raise SchemaRootError(root="query")

    resolver = RemoteExecution.make_resolver(
        fetcher,
        transform or FilterToSchema(schema),
        get_store,
    )

    resolvers: Resolvers = {
        query_type.name: dict.fromkeys(query_type.fields, resolver),
    }

    mutation_type = schema.mutation_type
    if mutation_type is not None:
        resolvers[mutation_type.name] = dict.fromkeys(mutation_type.fields, resolver)

    logger.debug(
        "Built remote resolvers",
        extra={"fields": {name: len(fields) for name, fields in resolvers.items()}},
    )
    return resolvers


def bind_resolvers(
    schema: GraphQLSchema,
    resolvers: Mapping[str, Mapping[str, GraphQLFieldResolver]],
) -> GraphQLSchema:
    """Attach a resolver map to the object types of ``schema`` in place.

    Raises:
        ResolverBindingError: If a type is not an object type of the schema,
            or lacks one of the fields.
    """
    for type_name, field_resolvers in resolvers.items():
        object_type = schema.get_type(type_name)
        if not isinstance(object_type, GraphQLObjectType):
            raise ResolverBindingError(type_name)

        for field_name, resolver in field_resolvers.items():
            field = object_type.fields.get(field_name)
            if field is None:
                raise ResolverBindingError(type_name, field_name)
            field.resolve = resolver

    return schema
