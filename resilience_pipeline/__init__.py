"""Composable resilience pipeline: timeout, retry, circuit breaker, fallback."""

__version__ = "1.0.0"
