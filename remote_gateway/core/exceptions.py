"""Custom exception classes for the gateway."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
            raise AppException(
            status_code=502,
            detail="Remote endpoint unavailable",
            type="remote-fetch-failed",
            extra={"url": "http://remote/graphql"}
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code.

        Args:
            status_code: HTTP status code.

        Returns:
            Human-readable title for the status code.
        """
        titles = {
            400: "Bad Request",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            502: "Bad Gateway",
            503: "Service Unavailable",
            504: "Gateway Timeout",
        }
        return titles.get(status_code, "Error")


class SchemaRootError(AppException):
    """Raised when a schema lacks a root type the gateway requires.

    Example:
            raise SchemaRootError(root="query")
    """

    def __init__(
        self,
        root: str,
        detail: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize schema root error.

        Args:
            root: Root operation kind that is missing (query, mutation).
            detail: Optional override for the message.
            extra: Additional context about the error.
        """
        super().__init__(
            status_code=500,
            detail=detail or f"Schema has no {root} root type",
            type="schema-root-missing",
            title="Schema Root Missing",
            extra={"root": root, **(extra or {})},
        )


class ResolverBindingError(AppException):
    """Raised when resolvers target a type or field the schema does not define."""

    def __init__(
        self,
        type_name: str,
        field_name: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        if field_name is None:
            detail = f"Type {type_name!r} is not an object type of the schema"
        else:
            detail = f"Type {type_name!r} has no field {field_name!r}"
        super().__init__(
            status_code=500,
            detail=detail,
            type="resolver-binding-failed",
            title="Resolver Binding Failed",
            extra={"type_name": type_name, "field_name": field_name, **(extra or {})},
        )


class ExecutionStoreError(AppException):
    """Raised when an execution context cannot hold the coalescing slot."""

    def __init__(
        self,
        detail: str,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type="execution-store-unavailable",
            title="Execution Store Unavailable",
            extra=extra,
        )


class RemoteFetchError(AppException):
    """Exception raised when the remote GraphQL source fails.

    Covers transport errors, non-2xx responses, undecodable bodies and
    payloads that carry errors without any data.

    Example:
            raise RemoteFetchError(
            detail="Remote returned HTTP 503",
            upstream_status=503,
        )
    """

    def __init__(
        self,
        detail: str,
        upstream_status: int | None = None,
        errors: list[dict[str, Any]] | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize remote fetch error.

        Args:
            detail: Human-readable error message.
            upstream_status: HTTP status returned by the remote, if any.
            errors: GraphQL errors reported by the remote, if any.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        merged_extra = {**(extra or {})}
        if upstream_status is not None:
            merged_extra["upstream_status"] = upstream_status
        if errors:
            merged_extra["errors"] = errors
        super().__init__(
            status_code=502,
            detail=detail,
            type="remote-fetch-failed",
            title="Bad Gateway",
            instance=instance,
            extra=merged_extra,
        )
        self.upstream_status = upstream_status
        self.errors = errors or []


__all__ = [
    "AppException",
    "ExecutionStoreError",
    "RemoteFetchError",
    "ResolverBindingError",
    "SchemaRootError",
]
