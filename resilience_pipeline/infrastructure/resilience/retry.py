"""Retry executor with a fixed delay between attempts."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from resilience_pipeline.infrastructure.observability.metrics import RETRY_ATTEMPTS
from resilience_pipeline.shared_kernel.exceptions import RetryExhaustedError

from .config import RetryConfig
from .operation import Operation, call_operation

logger = logging.getLogger(__name__)


async def async_retry(
    operation: Operation,
    retries: int = 3,
    delay_ms: int = 1000,
    wrap_exhausted: bool = False,
) -> Any:
    attempt = 0
    while True:
        attempt += 1
        try:
            return await call_operation(operation)
        except Exception as exc:
            if attempt > retries:
                if wrap_exhausted:
                    raise RetryExhaustedError(exc, attempt) from exc
                raise
            RETRY_ATTEMPTS.inc()
            logger.warning(
                "Attempt %d/%d failed: %r; retrying in %sms",
                attempt,
                retries + 1,
                exc,
                delay_ms,
            )
            if delay_ms:
                await asyncio.sleep(delay_ms / 1000)


class RetryExecutor:
    def __init__(self, config: RetryConfig) -> None:
        self._config = config

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def run(self, operation: Operation) -> Any:
        if not self._config.enabled:
            return await call_operation(operation)
        return await async_retry(
            operation,
            retries=self._config.max_retries,
            delay_ms=self._config.delay_ms,
            wrap_exhausted=self._config.wrap_exhausted,
        )

    def wrap(self, operation: Operation) -> Callable[[], Awaitable[Any]]:
        async def retried() -> Any:
            return await self.run(operation)
        return retried
