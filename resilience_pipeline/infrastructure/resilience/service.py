"""Facade exposing every resilience entry point behind one injected service."""
from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, Optional

from .chain import ResilienceChain
from .circuit_breaker import CircuitBreaker, CircuitBreakerState
from .config import (
    CircuitBreakerConfig,
    FallbackConfig,
    ResilienceConfigs,
    RetryConfig,
    TimeoutConfig,
)
from .fallback import FallbackInvoker
from .operation import Operation, call_operation
from .retry import RetryExecutor
from .timeout import TimeoutGuard

DEFAULT_BREAKER = "default"


class BreakerRegistry:
    """One circuit breaker per protected-operation name, created on first use."""

    def __init__(self, config: CircuitBreakerConfig) -> None:
        self._config = config
        self._breakers: Dict[str, CircuitBreaker] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> CircuitBreaker:
        with self._lock:
            breaker = self._breakers.get(name)
            if breaker is None:
                breaker = CircuitBreaker(name=name, config=self._config)
                self._breakers[name] = breaker
            return breaker


class ResilienceService:
    def __init__(self, configs: ResilienceConfigs) -> None:
        self._configs = configs
        self._breakers = (
            BreakerRegistry(configs.circuit_breaker) if configs.circuit_breaker else None
        )
        self._timeout = TimeoutGuard(configs.timeout) if configs.timeout else None
        self._retry = RetryExecutor(configs.retry) if configs.retry else None
        self._fallback = FallbackInvoker(configs.fallback) if configs.fallback else None

    @property
    def configs(self) -> ResilienceConfigs:
        return self._configs

    def breaker(self, name: str = DEFAULT_BREAKER) -> Optional[CircuitBreaker]:
        if self._breakers is None:
            return None
        return self._breakers.get(name)

    def chain(self, name: str = DEFAULT_BREAKER) -> ResilienceChain:
        return ResilienceChain(self._configs, breaker=self.breaker(name), name=name)

    async def execute(
        self,
        operation: Operation,
        name: str = DEFAULT_BREAKER,
        only: Optional[Iterable[str]] = None,
    ) -> Any:
        return await self.chain(name).execute(operation, only=only)

    async def execute_timeout(self, operation: Operation) -> Any:
        if self._timeout is None:
            return await call_operation(operation)
        return await self._timeout.run(operation)

    async def execute_retry(self, operation: Operation) -> Any:
        if self._retry is None:
            return await call_operation(operation)
        return await self._retry.run(operation)

    async def execute_circuit_breaker(self, operation: Operation, name: str = DEFAULT_BREAKER) -> Any:
        breaker = self.breaker(name)
        if breaker is None:
            return await call_operation(operation)
        return await breaker.execute(operation)

    async def execute_fallback(self, operation: Operation) -> Any:
        if self._fallback is None:
            return await call_operation(operation)
        return await self._fallback.run(operation)

    def get_timeout_config(self) -> Optional[TimeoutConfig]:
        return self._configs.timeout

    def get_retry_config(self) -> Optional[RetryConfig]:
        return self._configs.retry

    def get_circuit_breaker_config(self) -> Optional[CircuitBreakerConfig]:
        return self._configs.circuit_breaker

    def get_fallback_config(self) -> Optional[FallbackConfig]:
        return self._configs.fallback

    def get_circuit_breaker_state(self, name: str = DEFAULT_BREAKER) -> Optional[CircuitBreakerState]:
        breaker = self.breaker(name)
        return breaker.snapshot() if breaker else None
