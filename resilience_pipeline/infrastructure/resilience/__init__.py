"""Resilience utilities (timeout, retry, circuit breaker, fallback, chain)."""

from .config import (
    TimeoutConfig,
    RetryConfig,
    CircuitBreakerConfig,
    FallbackConfig,
    ResilienceConfigs,
)
from .circuit_breaker import CircuitBreaker, CircuitBreakerState, CircuitState
from .retry import RetryExecutor, async_retry
from .timeout import TimeoutGuard, with_timeout
from .fallback import FallbackInvoker
from .chain import LAYER_ORDER, ResilienceChain, breaker_for, compose, execute
from .service import BreakerRegistry, ResilienceService
from .decorators import (
    resilient,
    with_circuit_breaker,
    with_fallback,
    with_retry,
    with_timeout_decorator,
)

__all__ = [
    "TimeoutConfig",
    "RetryConfig",
    "CircuitBreakerConfig",
    "FallbackConfig",
    "ResilienceConfigs",
    "CircuitBreaker",
    "CircuitBreakerState",
    "CircuitState",
    "RetryExecutor",
    "async_retry",
    "TimeoutGuard",
    "with_timeout",
    "FallbackInvoker",
    "LAYER_ORDER",
    "ResilienceChain",
    "breaker_for",
    "compose",
    "execute",
    "BreakerRegistry",
    "ResilienceService",
    "resilient",
    "with_circuit_breaker",
    "with_fallback",
    "with_retry",
    "with_timeout_decorator",
]
