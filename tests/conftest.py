import logging
import os
import sys
from pathlib import Path

import pytest
import structlog

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("LOG_JSON", "false")

from resilience_pipeline.infrastructure.di.container import Container  # noqa: E402


@pytest.fixture(autouse=True)
def reset_container():
    Container.reset()
    yield
    Container.reset()
    structlog.reset_defaults()
    logging.getLogger("resilience_pipeline").setLevel(logging.NOTSET)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


@pytest.fixture
def clock():
    return FakeClock()


class CallCounter:
    """Operation stub that fails a fixed number of times before succeeding."""

    def __init__(self, failures: int = 0, result="ok", error_factory=None) -> None:
        self.failures = failures
        self.result = result
        self.calls = 0
        self.errors = []
        self._error_factory = error_factory or (lambda n: RuntimeError(f"failure {n}"))

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            error = self._error_factory(self.calls)
            self.errors.append(error)
            raise error
        return self.result


@pytest.fixture
def make_operation():
    return CallCounter
