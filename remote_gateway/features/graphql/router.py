"""GraphQL router for FastAPI integration.

Provides a POST endpoint executing GraphQL documents against the schema
stored on ``app.state.graphql_schema``. Each request gets a fresh
``GraphQLContext``, which is what scopes remote fetch coalescing to that
one request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import APIRouter, Request
from graphql import graphql
from pydantic import BaseModel, ConfigDict, Field

from remote_gateway.core.exceptions import AppException
from remote_gateway.features.graphql.context import GraphQLContext
from remote_gateway.features.graphql.error_handler import process_graphql_errors
from remote_gateway.infra.logging import set_log_context

if TYPE_CHECKING:
    from graphql import GraphQLSchema

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"


class GraphQLRequestBody(BaseModel):
    """GraphQL-over-HTTP request body."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(min_length=1, description="GraphQL document")
    variables: dict[str, Any] | None = Field(default=None, description="Variable values")
    operation_name: str | None = Field(
        default=None,
        alias="operationName",
        description="Operation to run when the document holds several",
    )


def get_graphql_context(request: Request) -> GraphQLContext:
    """Create the per-request GraphQL context."""
    correlation_id = request.headers.get(CORRELATION_HEADER) or uuid4().hex
    set_log_context(correlation_id=correlation_id)
    return GraphQLContext(request=request, correlation_id=correlation_id)


def create_graphql_router(path: str = "/graphql") -> APIRouter:
    """Create the GraphQL router.

    Args:
        path: Endpoint path of the GraphQL API.
    """
    router = APIRouter(tags=["graphql"])

    @router.post(path)
    async def execute_graphql(body: GraphQLRequestBody, request: Request) -> dict[str, Any]:
        schema: GraphQLSchema | None = getattr(request.app.state, "graphql_schema", None)
        if schema is None:
            raise AppException(
                status_code=503,
                detail="GraphQL schema is not loaded",
                type="schema-unavailable",
            )

        context = get_graphql_context(request)
        result = await graphql(
            schema,
            body.query,
            context_value=context,
            variable_values=body.variables,
            operation_name=body.operation_name,
        )

        payload: dict[str, Any] = {"data": result.data}
        if result.errors:
            payload["errors"] = process_graphql_errors(result.errors)
        logger.debug(
            "Executed GraphQL operation",
            extra={
                "operation_name": body.operation_name,
                "error_count": len(result.errors or ()),
                "remote_fetched": context.remote_execution is not None,
            },
        )
        return payload

    return router


__all__ = ["GraphQLRequestBody", "create_graphql_router", "get_graphql_context"]
