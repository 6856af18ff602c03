"""Request capture and response projection for remote fields.

``capture_request`` turns the resolve info of a top-level field into the
``RemoteRequest`` sent upstream; ``project_field`` reads one field's slice
back out of the shared response.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from graphql import DocumentNode

if TYPE_CHECKING:
    from graphql import GraphQLResolveInfo

__all__ = ["RemoteRequest", "capture_request", "project_field", "response_data"]


@dataclass(frozen=True)
class RemoteRequest:
    """One operation as sent to the remote source.

    Attributes:
        document: Operation definition plus the fragment definitions it may use.
        variables: Variable values keyed by variable name.
        operation_name: Name of the operation, if it has one.
        context: Execution context of the request (set just before fetching).
    """

    document: DocumentNode
    variables: dict[str, Any] = field(default_factory=dict)
    operation_name: str | None = None
    context: Any = None


def capture_request(info: GraphQLResolveInfo) -> RemoteRequest:
    """Capture the operation being executed by ``info``'s resolver."""
    operation = info.operation
    return RemoteRequest(
        document=DocumentNode(definitions=(operation, *info.fragments.values())),
        variables=dict(info.variable_values or {}),
        operation_name=operation.name.value if operation.name else None,
    )


def response_data(response: Any) -> Mapping[str, Any] | None:
    """Return the ``data`` mapping of a response.

    Accepts ``{"data": ...}`` mappings as well as objects with a ``data``
    attribute such as ``graphql.ExecutionResult``.
    """
    if isinstance(response, Mapping):
        return response.get("data")
    return getattr(response, "data", None)


def project_field(response: Any, key: str) -> Any:
    """Return the value the response holds for one response key.

    Missing keys and missing data resolve to None.
    """
    data = response_data(response)
    if data is None:
        return None
    return data.get(key)
