"""Timeout guard racing an operation against a deadline."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from resilience_pipeline.infrastructure.observability.metrics import TIMEOUTS
from resilience_pipeline.shared_kernel.exceptions import OperationTimeoutError

from .config import TimeoutConfig
from .operation import Operation, call_operation

logger = logging.getLogger(__name__)


def _discard_late_outcome(task: "asyncio.Task[Any]") -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug("Discarded late failure after timeout: %r", error)


async def with_timeout(operation: Operation, timeout_ms: int) -> Any:
    """Return the operation's outcome, or raise if ``timeout_ms`` elapses first.

    The losing task is cancelled but never awaited; whatever it produces
    afterwards is dropped.
    """
    task = asyncio.ensure_future(call_operation(operation))
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        task.cancel()
        raise
    if task in done:
        return task.result()

    task.add_done_callback(_discard_late_outcome)
    task.cancel()
    TIMEOUTS.inc()
    logger.warning("Operation timed out after %sms", timeout_ms)
    raise OperationTimeoutError(timeout_ms)


class TimeoutGuard:
    def __init__(self, config: TimeoutConfig) -> None:
        self._config = config

    @property
    def config(self) -> TimeoutConfig:
        return self._config

    async def run(self, operation: Operation) -> Any:
        if not self._config.enabled:
            return await call_operation(operation)
        return await with_timeout(operation, self._config.timeout_ms)

    def wrap(self, operation: Operation) -> Callable[[], Awaitable[Any]]:
        async def guarded() -> Any:
            return await self.run(operation)
        return guarded
