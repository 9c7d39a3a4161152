"""Resilience decorators."""
from __future__ import annotations

from functools import partial, wraps
from typing import Any, Callable, Optional

from .chain import ResilienceChain
from .circuit_breaker import CircuitBreaker
from .config import FallbackConfig, ResilienceConfigs, RetryConfig, TimeoutConfig
from .fallback import FallbackInvoker
from .retry import RetryExecutor
from .timeout import TimeoutGuard


def with_circuit_breaker(breaker: CircuitBreaker) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await breaker.execute(partial(func, *args, **kwargs))
        return wrapper
    return decorator


def with_retry(max_retries: int = 3, delay_ms: int = 1000):
    executor = RetryExecutor(RetryConfig(max_retries=max_retries, delay_ms=delay_ms))

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await executor.run(partial(func, *args, **kwargs))
        return wrapper
    return decorator


def with_timeout_decorator(timeout_ms: int):
    guard = TimeoutGuard(TimeoutConfig(timeout_ms=timeout_ms))

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await guard.run(partial(func, *args, **kwargs))
        return wrapper
    return decorator


def with_fallback(fallback_method: Callable[..., Any]):
    invoker = FallbackInvoker(FallbackConfig(fallback_method=fallback_method))

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await invoker.run(partial(func, *args, **kwargs))
        return wrapper
    return decorator


def resilient(configs: ResilienceConfigs, name: Optional[str] = None):
    """Wrap a function in the full chain, with one breaker per decorated function."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        chain = ResilienceChain(configs, name=name or func.__qualname__)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await chain.execute(partial(func, *args, **kwargs))

        wrapper.resilience_chain = chain  # type: ignore[attr-defined]
        return wrapper
    return decorator
