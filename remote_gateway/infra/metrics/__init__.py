"""Prometheus metrics."""

from remote_gateway.infra.metrics.prometheus import (
    REGISTRY,
    remote_coalesced_fields_total,
    remote_fetch_duration_seconds,
    remote_fetches_total,
)

__all__ = [
    "REGISTRY",
    "remote_coalesced_fields_total",
    "remote_fetch_duration_seconds",
    "remote_fetches_total",
]
