"""Logging infrastructure.

Structured logging on the standard library:
- JSONL format for log aggregation
- Automatic context injection (correlation_id, ...)
- OpenTelemetry trace correlation

Basic usage:
    from remote_gateway.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(correlation_id="abc-123")
    logger.info("Executing operation")  # Automatically includes correlation_id
"""

from remote_gateway.infra.logging.config import (
    build_logging_config,
    configure_logging,
    setup_logging,
)
from remote_gateway.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from remote_gateway.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "build_logging_config",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
]
