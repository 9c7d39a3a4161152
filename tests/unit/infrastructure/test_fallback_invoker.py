import pytest

from resilience_pipeline.infrastructure.resilience import FallbackConfig, FallbackInvoker
from resilience_pipeline.shared_kernel.exceptions import ValidationError


@pytest.mark.asyncio
async def test_always_failing_operation_yields_fallback_value(make_operation):
    operation = make_operation(failures=100)
    invoker = FallbackInvoker(FallbackConfig(fallback_method=lambda: "X"))

    assert await invoker.run(operation) == "X"
    assert operation.calls == 1


@pytest.mark.asyncio
async def test_success_skips_fallback(make_operation):
    called = []
    invoker = FallbackInvoker(FallbackConfig(fallback_method=lambda: called.append(1)))

    assert await invoker.run(make_operation(result="primary")) == "primary"
    assert called == []


@pytest.mark.asyncio
async def test_one_argument_fallback_receives_the_failure(make_operation):
    operation = make_operation(failures=1)
    seen = []

    def fallback(error):
        seen.append(error)
        return "cached"

    invoker = FallbackInvoker(FallbackConfig(fallback_method=fallback))

    assert await invoker.run(operation) == "cached"
    assert seen == operation.errors


@pytest.mark.asyncio
async def test_async_fallback_is_awaited(make_operation):
    async def fallback():
        return "async-default"

    invoker = FallbackInvoker(FallbackConfig(fallback_method=fallback))
    assert await invoker.run(make_operation(failures=1)) == "async-default"


@pytest.mark.asyncio
async def test_failing_fallback_propagates(make_operation):
    def fallback():
        raise LookupError("no cached value")

    invoker = FallbackInvoker(FallbackConfig(fallback_method=fallback))

    with pytest.raises(LookupError) as exc_info:
        await invoker.run(make_operation(failures=1))
    assert exc_info.value.__context__ is None


@pytest.mark.asyncio
async def test_disabled_fallback_passes_failure_through(make_operation):
    operation = make_operation(failures=1)
    invoker = FallbackInvoker(FallbackConfig(enabled=False, fallback_method=lambda: "X"))

    with pytest.raises(RuntimeError) as exc_info:
        await invoker.run(operation)
    assert exc_info.value is operation.errors[0]


def test_enabled_fallback_requires_a_method():
    with pytest.raises(ValidationError):
        FallbackConfig(enabled=True)


def test_fallback_method_must_be_callable():
    with pytest.raises(ValidationError):
        FallbackConfig(fallback_method="X")
