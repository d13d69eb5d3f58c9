# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

REGISTRY = CollectorRegistry()

REQUEST_LATENCY = Histogram(
    "nestfinder_request_latency_seconds",
    "Request latency",
    labelnames=("method",),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
    registry=REGISTRY,
)
REQUEST_COUNTER = Counter(
    "nestfinder_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
    registry=REGISTRY,
)
OUTBOUND_FAILURES = Counter(
    "nestfinder_outbound_failures_total",
    "Best-effort collaborator calls that gave up",
    labelnames=("collaborator",),
    registry=REGISTRY,
)


def observe_request(method: str, endpoint: str | None, status: int, seconds: float) -> None:
    REQUEST_LATENCY.labels(method=method).observe(seconds)
    REQUEST_COUNTER.labels(endpoint=endpoint or "unmatched", status=str(status)).inc()


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


__all__ = [
    "OUTBOUND_FAILURES",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "observe_request",
    "render_metrics",
]
