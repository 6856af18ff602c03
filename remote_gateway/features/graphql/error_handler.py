"""GraphQL error handling and production error masking.

Errors raised while resolving remote fields reach the client through
``process_graphql_errors``: gateway errors (``AppException``) keep their
message and gain an ``extensions.code``; anything else is logged with its
traceback and masked in production.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from remote_gateway.core.exceptions import AppException
from remote_gateway.core.settings import get_app_settings

if TYPE_CHECKING:
    from graphql import GraphQLError, GraphQLFormattedError

logger = logging.getLogger(__name__)

__all__ = ["error_code", "mask_internal_error", "process_graphql_errors"]

INTERNAL_ERROR = "INTERNAL_ERROR"
GRAPHQL_ERROR = "GRAPHQL_ERROR"


def process_graphql_errors(errors: list[GraphQLError]) -> list[GraphQLFormattedError]:
    """Format GraphQL errors before returning them to the client.

    Args:
        errors: Errors from execution

    Returns:
        List of formatted errors safe to return to client
    """
    is_production = get_app_settings().is_production
    processed: list[GraphQLFormattedError] = []

    for error in errors:
        original = error.original_error

        if original is None:
            # Syntax/validation errors are about the client's document
            processed.append(_with_extensions(error.formatted, code=GRAPHQL_ERROR))
            continue

        if isinstance(original, AppException):
            logger.warning(
                "GraphQL field failed: %s",
                original.detail,
                extra={"path": error.path, "error_type": original.type},
            )
            processed.append(_with_extensions(error.formatted, code=error_code(original)))
            continue

        logger.error(
            "Unhandled error in GraphQL resolver",
            exc_info=original,
            extra={"path": error.path},
        )
        if is_production:
            processed.append(mask_internal_error(error))
        else:
            debug = {
                "exception_type": type(original).__name__,
                "exception_message": str(original),
            }
            processed.append(_with_extensions(error.formatted, code=INTERNAL_ERROR, debug=debug))

    return processed


def error_code(exc: AppException) -> str:
    """Derive a stable error code from an exception type, e.g. ``REMOTE_FETCH_FAILED``."""
    return exc.type.upper().replace("-", "_")


def mask_internal_error(error: GraphQLError) -> GraphQLFormattedError:
    """Replace an internal error's message, keeping its location and path."""
    masked: GraphQLFormattedError = {
        "message": "An internal error occurred",
        "extensions": {"code": INTERNAL_ERROR},
    }
    if error.locations:
        masked["locations"] = [location.formatted for location in error.locations]
    if error.path is not None:
        masked["path"] = error.path
    return masked


def _with_extensions(formatted: GraphQLFormattedError, **extensions: Any) -> GraphQLFormattedError:
    # error.formatted shares the error's own extensions dict
    return {**formatted, "extensions": {**formatted.get("extensions", {}), **extensions}}
