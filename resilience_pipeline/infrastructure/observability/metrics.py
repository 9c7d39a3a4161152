"""Prometheus metrics for the resilience layers."""
from __future__ import annotations

from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST


CIRCUIT_BREAKER_STATE = Gauge(
    "resilience_circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=half_open, 2=open)",
    ["name"],
)

CIRCUIT_BREAKER_REJECTIONS = Counter(
    "resilience_circuit_breaker_rejections_total",
    "Calls rejected by an open circuit",
    ["name"],
)

RETRY_ATTEMPTS = Counter(
    "resilience_retry_attempts_total",
    "Failed attempts followed by a retry",
)

TIMEOUTS = Counter(
    "resilience_timeouts_total",
    "Operations abandoned after their deadline",
)

FALLBACK_INVOCATIONS = Counter(
    "resilience_fallback_invocations_total",
    "Failures resolved by a fallback method",
)


def render_metrics() -> bytes:
    return generate_latest()


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
