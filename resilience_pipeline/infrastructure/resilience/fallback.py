"""Fallback invoker producing a substitute result on failure."""
from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable

from resilience_pipeline.infrastructure.observability.metrics import FALLBACK_INVOCATIONS

from .config import FallbackConfig
from .operation import Operation, call_operation

logger = logging.getLogger(__name__)


def _accepts_error(method: Callable[..., Any]) -> bool:
    try:
        parameters = inspect.signature(method).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [
        p for p in parameters
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
    ]
    return bool(positional)


async def invoke_fallback(method: Callable[..., Any], error: Exception) -> Any:
    result = method(error) if _accepts_error(method) else method()
    if inspect.isawaitable(result):
        return await result
    return result


class FallbackInvoker:
    def __init__(self, config: FallbackConfig) -> None:
        self._config = config

    @property
    def config(self) -> FallbackConfig:
        return self._config

    async def run(self, operation: Operation) -> Any:
        if not self._config.enabled:
            return await call_operation(operation)
        try:
            return await call_operation(operation)
        except Exception as exc:
            error = exc
        # A failing fallback propagates with no __context__ pointing at the original error.
        FALLBACK_INVOCATIONS.inc()
        logger.info("Operation failed (%r); using fallback", error)
        return await invoke_fallback(self._config.fallback_method, error)  # type: ignore[arg-type]

    def wrap(self, operation: Operation) -> Callable[[], Awaitable[Any]]:
        async def with_fallback() -> Any:
            return await self.run(operation)
        return with_fallback
