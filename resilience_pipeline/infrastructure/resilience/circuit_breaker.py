"""Circuit breaker implementation.

States:
    CLOSED: calls pass through; outcomes are counted in a rolling window
    OPEN: calls are rejected with ``CircuitOpenError`` until the reset timeout
    HALF_OPEN: a single trial call decides between CLOSED and OPEN

Every read and write of the breaker state happens under ``_lock``. The lock
is never held across an ``await``.
"""
from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from resilience_pipeline.infrastructure.observability.metrics import (
    CIRCUIT_BREAKER_REJECTIONS,
    CIRCUIT_BREAKER_STATE,
)
from resilience_pipeline.shared_kernel.exceptions import CircuitOpenError

from .config import CircuitBreakerConfig
from .operation import Operation, call_operation
from .timeout import with_timeout

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


_GAUGE_VALUES = {
    CircuitState.CLOSED: 0,
    CircuitState.HALF_OPEN: 1,
    CircuitState.OPEN: 2,
}


@dataclass(frozen=True)
class CircuitBreakerState:
    """Point-in-time view of a breaker, safe to hand out for introspection."""

    state: CircuitState
    failure_count: int
    success_count: int
    total_count: int
    opened_at: Optional[datetime]


@dataclass
class CircuitBreaker:
    name: str
    config: CircuitBreakerConfig = field(default_factory=CircuitBreakerConfig)
    clock: Callable[[], float] = time.monotonic

    _state: CircuitState = field(default=CircuitState.CLOSED, init=False)
    _failure_count: int = field(default=0, init=False)
    _success_count: int = field(default=0, init=False)
    _total_count: int = field(default=0, init=False)
    _opened_at: Optional[float] = field(default=None, init=False)
    _opened_at_wall: Optional[datetime] = field(default=None, init=False)
    _window_started: Optional[float] = field(default=None, init=False)
    _trial_in_flight: bool = field(default=False, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        CIRCUIT_BREAKER_STATE.labels(self.name).set(_GAUGE_VALUES[self._state])

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    def snapshot(self) -> CircuitBreakerState:
        with self._lock:
            return CircuitBreakerState(
                state=self._state,
                failure_count=self._failure_count,
                success_count=self._success_count,
                total_count=self._total_count,
                opened_at=self._opened_at_wall,
            )

    def reset(self) -> None:
        """Force the breaker back to CLOSED with empty counters."""
        with self._lock:
            self._transition_to(CircuitState.CLOSED)

    async def execute(self, operation: Operation) -> Any:
        if not self.config.enabled:
            return await call_operation(operation)

        is_trial = self._acquire_permission()
        try:
            result = await with_timeout(operation, self.config.timeout_ms)
        except asyncio.CancelledError:
            if is_trial:
                with self._lock:
                    self._trial_in_flight = False
            raise
        except Exception:
            self._on_failure(is_trial)
            raise
        self._on_success(is_trial)
        return result

    def wrap(self, operation: Operation) -> Callable[[], Awaitable[Any]]:
        async def protected() -> Any:
            return await self.execute(operation)
        return protected

    def _acquire_permission(self) -> bool:
        """Admit or reject a call. Returns True when the call is the half-open trial."""
        with self._lock:
            if self._state == CircuitState.OPEN:
                elapsed_ms = (self.clock() - self._opened_at) * 1000  # type: ignore[operator]
                if elapsed_ms >= self.config.reset_timeout_ms:
                    self._transition_to(CircuitState.HALF_OPEN)

            if self._state == CircuitState.CLOSED:
                return False

            if self._state == CircuitState.HALF_OPEN and not self._trial_in_flight:
                self._trial_in_flight = True
                return True

        CIRCUIT_BREAKER_REJECTIONS.labels(self.name).inc()
        raise CircuitOpenError(self.name)

    def _on_success(self, is_trial: bool) -> None:
        with self._lock:
            if is_trial:
                self._transition_to(CircuitState.CLOSED)
                return
            # Outcomes of calls admitted before the breaker opened are dropped.
            if self._state != CircuitState.CLOSED:
                return
            self._roll_window()
            self._total_count += 1
            self._success_count += 1

    def _on_failure(self, is_trial: bool) -> None:
        with self._lock:
            if is_trial:
                self._transition_to(CircuitState.OPEN)
                return
            if self._state != CircuitState.CLOSED:
                return
            self._roll_window()
            self._total_count += 1
            self._failure_count += 1
            if self._total_count < self.config.volume_threshold:
                return
            failure_rate = self._failure_count / self._total_count * 100
            if failure_rate >= self.config.error_threshold_percentage:
                logger.warning(
                    "Circuit %s failure rate %.1f%% over %d calls reached threshold %d%%",
                    self.name,
                    failure_rate,
                    self._total_count,
                    self.config.error_threshold_percentage,
                )
                self._transition_to(CircuitState.OPEN)

    def _roll_window(self) -> None:
        now = self.clock()
        if (
            self._window_started is None
            or (now - self._window_started) * 1000 >= self.config.rolling_window_ms
        ):
            self._reset_counters()
            self._window_started = now

    def _reset_counters(self) -> None:
        self._failure_count = 0
        self._success_count = 0
        self._total_count = 0

    def _transition_to(self, new_state: CircuitState) -> None:
        old_state = self._state
        self._state = new_state
        self._trial_in_flight = False
        self._reset_counters()
        self._window_started = None

        if new_state == CircuitState.OPEN:
            self._opened_at = self.clock()
            self._opened_at_wall = datetime.now(timezone.utc)
        elif new_state == CircuitState.CLOSED:
            self._opened_at = None
            self._opened_at_wall = None

        CIRCUIT_BREAKER_STATE.labels(self.name).set(_GAUGE_VALUES[new_state])
        if old_state != new_state:
            logger.info("Circuit %s: %s -> %s", self.name, old_state.value, new_state.value)
