import pytest

from resilience_pipeline.shared_kernel import DomainException, Result, RetryExhaustedError


def test_success_result_exposes_value():
    result = Result.success(6)
    assert result.is_success
    assert result.value == 6
    assert result.error is None


def test_failure_result_raises_on_value():
    error = ValueError("bad")
    result = Result.failure(error)

    assert result.is_failure
    assert result.error is error
    with pytest.raises(ValueError):
        _ = result.value


def test_retry_exhausted_is_a_domain_exception():
    last = RuntimeError("last")
    error = RetryExhaustedError(last, attempts=4)

    assert isinstance(error, DomainException)
    assert error.code == "RETRY_EXHAUSTED"
    assert error.details == {"attempts": 4}
