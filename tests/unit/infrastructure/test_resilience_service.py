import asyncio

import pytest

from resilience_pipeline.infrastructure.resilience import (
    CircuitBreakerConfig,
    CircuitState,
    FallbackConfig,
    ResilienceConfigs,
    ResilienceService,
    RetryConfig,
    TimeoutConfig,
)
from resilience_pipeline.shared_kernel.exceptions import CircuitOpenError, OperationTimeoutError


@pytest.fixture
def configs():
    return ResilienceConfigs(
        timeout=TimeoutConfig(timeout_ms=50),
        retry=RetryConfig(max_retries=2, delay_ms=0),
        circuit_breaker=CircuitBreakerConfig(
            timeout_ms=1000,
            error_threshold_percentage=50,
            reset_timeout_ms=60000,
            volume_threshold=1,
        ),
        fallback=FallbackConfig(fallback_method=lambda: "fallback"),
    )


def test_accessors_return_active_configs(configs):
    service = ResilienceService(configs)

    assert service.get_timeout_config() is configs.timeout
    assert service.get_retry_config() is configs.retry
    assert service.get_circuit_breaker_config() is configs.circuit_breaker
    assert service.get_fallback_config() is configs.fallback
    assert service.get_circuit_breaker_state().state == CircuitState.CLOSED


@pytest.mark.asyncio
async def test_named_breakers_are_isolated(configs, make_operation):
    service = ResilienceService(configs)

    with pytest.raises(RuntimeError):
        await service.execute_circuit_breaker(make_operation(failures=1), name="payments")

    assert service.get_circuit_breaker_state("payments").state == CircuitState.OPEN
    assert service.get_circuit_breaker_state("search").state == CircuitState.CLOSED
    with pytest.raises(CircuitOpenError):
        await service.execute_circuit_breaker(make_operation(), name="payments")
    assert await service.execute_circuit_breaker(make_operation(result="hit"), name="search") == "hit"


@pytest.mark.asyncio
async def test_execute_reuses_the_named_breaker(configs, make_operation):
    service = ResilienceService(configs)
    operation = make_operation(failures=100)

    assert await service.execute(operation, name="inventory") == "fallback"
    assert operation.calls == 3
    assert await service.execute(operation, name="inventory") == "fallback"
    assert operation.calls == 3
    assert service.breaker("inventory") is service.breaker("inventory")


@pytest.mark.asyncio
async def test_single_pattern_entry_points(configs, make_operation):
    service = ResilienceService(configs)

    async def hang():
        await asyncio.sleep(1)

    with pytest.raises(OperationTimeoutError):
        await service.execute_timeout(hang)

    flaky = make_operation(failures=2)
    assert await service.execute_retry(flaky) == "ok"
    assert flaky.calls == 3

    assert await service.execute_fallback(make_operation(failures=1)) == "fallback"


@pytest.mark.asyncio
async def test_missing_patterns_pass_through(make_operation):
    service = ResilienceService(ResilienceConfigs())
    operation = make_operation(failures=1)

    for entry_point in (
        service.execute_timeout,
        service.execute_retry,
        service.execute_circuit_breaker,
        service.execute_fallback,
    ):
        with pytest.raises(RuntimeError):
            await entry_point(operation)
        operation.calls = 0

    assert service.get_circuit_breaker_state() is None
    assert await service.execute(make_operation(result=1)) == 1
