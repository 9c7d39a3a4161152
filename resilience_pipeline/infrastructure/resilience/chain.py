"""Composition of the resilience layers in their fixed order.

Outer to inner the chain is ``Fallback(CircuitBreaker(Retry(Timeout(op))))``:
every retry attempt has its own deadline, the breaker makes one decision per
call covering the whole retry cycle, and the fallback only runs once all of
the inner layers have given up.
"""
from __future__ import annotations

import itertools
import threading
import weakref
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple

from resilience_pipeline.shared_kernel.exceptions import ValidationError
from resilience_pipeline.shared_kernel.result import Result

from .circuit_breaker import CircuitBreaker
from .config import CircuitBreakerConfig, ResilienceConfigs
from .fallback import FallbackInvoker
from .operation import Operation, call_operation
from .retry import RetryExecutor
from .timeout import TimeoutGuard

# Innermost first.
LAYER_ORDER = ("timeout", "retry", "circuit_breaker", "fallback")

_chain_ids = itertools.count(1)


def _select_layers(only: Optional[Iterable[str]]) -> frozenset:
    if only is None:
        return frozenset(LAYER_ORDER)
    selected = frozenset(only)
    unknown = selected - set(LAYER_ORDER)
    if unknown:
        raise ValidationError(
            f"Unknown resilience layers: {', '.join(sorted(unknown))}",
            details={"layers": sorted(unknown), "allowed": list(LAYER_ORDER)},
        )
    return selected


class ResilienceChain:
    """Builds and runs the composed operation for one protected call site.

    When the breaker is enabled the chain owns a single circuit breaker,
    either the one it is given or a fresh one, so chains built independently
    never share breaker state.
    """

    def __init__(
        self,
        configs: ResilienceConfigs,
        breaker: Optional[CircuitBreaker] = None,
        name: Optional[str] = None,
    ) -> None:
        if not isinstance(configs, ResilienceConfigs):
            raise ValidationError("configs must be a ResilienceConfigs instance")
        self._configs = configs
        self._timeout = TimeoutGuard(configs.timeout) if configs.timeout else None
        self._retry = RetryExecutor(configs.retry) if configs.retry else None
        self._fallback = FallbackInvoker(configs.fallback) if configs.fallback else None
        if not configs.is_enabled("circuit_breaker"):
            breaker = None
        elif breaker is None:
            breaker = CircuitBreaker(
                name=name or f"chain-{next(_chain_ids)}",
                config=configs.circuit_breaker,
            )
        self._breaker = breaker

    @property
    def configs(self) -> ResilienceConfigs:
        return self._configs

    @property
    def breaker(self) -> Optional[CircuitBreaker]:
        return self._breaker

    def compose(
        self,
        operation: Operation,
        only: Optional[Iterable[str]] = None,
    ) -> Callable[[], Awaitable[Any]]:
        selected = _select_layers(only)
        wrappers = {
            "timeout": self._timeout,
            "retry": self._retry,
            "circuit_breaker": self._breaker,
            "fallback": self._fallback,
        }
        composed = operation
        for layer in LAYER_ORDER:
            engine = wrappers[layer]
            if layer not in selected or engine is None or not engine.config.enabled:
                continue
            composed = engine.wrap(composed)
        return _as_coroutine(composed)

    async def execute(self, operation: Operation, only: Optional[Iterable[str]] = None) -> Any:
        return await self.compose(operation, only=only)()

    async def execute_result(
        self,
        operation: Operation,
        only: Optional[Iterable[str]] = None,
    ) -> Result[Any, Exception]:
        """Like ``execute`` but returns the outcome instead of raising it."""
        composed = self.compose(operation, only=only)
        try:
            return Result.success(await composed())
        except Exception as exc:
            return Result.failure(exc)


def _as_coroutine(operation: Operation) -> Callable[[], Awaitable[Any]]:
    async def composed() -> Any:
        return await call_operation(operation)
    return composed


# Breakers for the module-level entry points, kept for the life of the process.
# Keyed by operation (bound methods by owner, then function) and by config.
_operation_breakers: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
_named_breakers: Dict[Tuple[str, CircuitBreakerConfig], CircuitBreaker] = {}
_breakers_lock = threading.Lock()


def breaker_for(
    operation: Operation,
    config: CircuitBreakerConfig,
    name: Optional[str] = None,
) -> CircuitBreaker:
    """Return the shared breaker protecting ``operation`` (or ``name``)."""
    with _breakers_lock:
        if name is not None:
            breaker = _named_breakers.get((name, config))
            if breaker is None:
                breaker = CircuitBreaker(name=name, config=config)
                _named_breakers[(name, config)] = breaker
            return breaker

        owner = getattr(operation, "__self__", None)
        function = getattr(operation, "__func__", None)
        if owner is None or function is None:
            owner, function = operation, None
        try:
            per_owner = _operation_breakers.setdefault(owner, {})
        except TypeError:
            raise ValidationError(
                f"Cannot track a circuit breaker for {operation!r}; pass name= or breaker=",
                details={"operation": repr(operation)},
            ) from None
        breaker = per_owner.get((function, config))
        if breaker is None:
            label = getattr(function or operation, "__qualname__", type(operation).__qualname__)
            breaker = CircuitBreaker(name=label, config=config)
            per_owner[(function, config)] = breaker
        return breaker


def compose(
    operation: Operation,
    configs: ResilienceConfigs,
    only: Optional[Iterable[str]] = None,
    breaker: Optional[CircuitBreaker] = None,
    name: Optional[str] = None,
) -> Callable[[], Awaitable[Any]]:
    """Compose ``operation`` with the layers ``configs`` enables.

    Without an explicit ``breaker`` the circuit breaker is shared by every
    call for the same operation object, or for the same ``name``.
    """
    if breaker is None and isinstance(configs, ResilienceConfigs) and configs.is_enabled("circuit_breaker"):
        breaker = breaker_for(operation, configs.circuit_breaker, name=name)
    return ResilienceChain(configs, breaker=breaker).compose(operation, only=only)


async def execute(
    operation: Operation,
    configs: ResilienceConfigs,
    only: Optional[Iterable[str]] = None,
    breaker: Optional[CircuitBreaker] = None,
    name: Optional[str] = None,
) -> Any:
    return await compose(operation, configs, only=only, breaker=breaker, name=name)()
