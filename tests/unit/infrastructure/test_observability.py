import json
import logging

import pytest
import structlog
from prometheus_client import REGISTRY

from resilience_pipeline.infrastructure.observability import (
    configure_structlog,
    log_resilience_config,
    render_metrics,
)
from resilience_pipeline.infrastructure.resilience import (
    CircuitBreaker,
    CircuitBreakerConfig,
    FallbackConfig,
    ResilienceConfigs,
    RetryConfig,
)
from resilience_pipeline.shared_kernel.exceptions import CircuitOpenError


@pytest.fixture
def structlog_json():
    configure_structlog(level="INFO", json=True)
    yield
    structlog.reset_defaults()


def named_fallback():
    return None


def test_boot_config_is_logged_per_pattern(structlog_json, caplog):
    caplog.set_level(logging.INFO, logger="resilience_pipeline.boot")
    configs = ResilienceConfigs(
        retry=RetryConfig(max_retries=2, delay_ms=100),
        fallback=FallbackConfig(fallback_method=named_fallback),
    )

    log_resilience_config(configs)

    events = [
        json.loads(record.getMessage())
        for record in caplog.records
        if record.name == "resilience_pipeline.boot"
    ]
    by_pattern = {event["pattern"]: event for event in events}
    assert set(by_pattern) == {"timeout", "retry", "circuit_breaker", "fallback"}
    assert by_pattern["timeout"]["enabled"] is False
    assert by_pattern["retry"]["max_retries"] == 2
    assert by_pattern["fallback"]["fallback_method"] == "named_fallback"
    assert all(event["event"] == "resilience_config" for event in events)


@pytest.mark.asyncio
async def test_breaker_state_and_rejections_are_exported():
    breaker = CircuitBreaker(name="metrics-test", config=CircuitBreakerConfig(volume_threshold=1))
    labels = {"name": "metrics-test"}
    assert REGISTRY.get_sample_value("resilience_circuit_breaker_state", labels) == 0.0

    async def fail():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await breaker.execute(fail)
    with pytest.raises(CircuitOpenError):
        await breaker.execute(fail)

    assert REGISTRY.get_sample_value("resilience_circuit_breaker_state", labels) == 2.0
    assert REGISTRY.get_sample_value("resilience_circuit_breaker_rejections_total", labels) == 1.0
    assert b"resilience_circuit_breaker_state" in render_metrics()
