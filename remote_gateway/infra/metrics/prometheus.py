"""Prometheus metrics for remote fetch coalescing."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry so the gateway's metrics are isolated from the default one
REGISTRY = CollectorRegistry()

# Upstream round trips, 5ms to 30s
FETCH_LATENCY_BUCKETS = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
)

remote_fetches_total = Counter(
    "remote_fetches_total",
    "Upstream GraphQL fetches issued, one per coalesced execution",
    ["operation_type", "status"],
    registry=REGISTRY,
)

remote_fetch_duration_seconds = Histogram(
    "remote_fetch_duration_seconds",
    "Upstream GraphQL fetch duration in seconds",
    ["operation_type"],
    buckets=FETCH_LATENCY_BUCKETS,
    registry=REGISTRY,
)

remote_coalesced_fields_total = Counter(
    "remote_coalesced_fields_total",
    "Top-level fields served from an already started upstream fetch",
    ["operation_type"],
    registry=REGISTRY,
)
