"""Observability utilities (metrics, logging)."""

from .metrics import (
    CIRCUIT_BREAKER_STATE,
    CIRCUIT_BREAKER_REJECTIONS,
    RETRY_ATTEMPTS,
    TIMEOUTS,
    FALLBACK_INVOCATIONS,
    render_metrics,
    METRICS_CONTENT_TYPE,
)
from .structured_logging import configure_structlog, log_resilience_config

__all__ = [
    "CIRCUIT_BREAKER_STATE",
    "CIRCUIT_BREAKER_REJECTIONS",
    "RETRY_ATTEMPTS",
    "TIMEOUTS",
    "FALLBACK_INVOCATIONS",
    "render_metrics",
    "METRICS_CONTENT_TYPE",
    "configure_structlog",
    "log_resilience_config",
]
