"""Per-pattern configuration records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from resilience_pipeline.shared_kernel.exceptions import ValidationError


def _require_int(owner: str, name: str, value: Any, minimum: int) -> None:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{owner}.{name} must be an integer, got {value!r}",
            details={"field": name, "value": value},
        )
    if value < minimum:
        raise ValidationError(
            f"{owner}.{name} must be >= {minimum}, got {value}",
            details={"field": name, "value": value},
        )


@dataclass(frozen=True)
class TimeoutConfig:
    enabled: bool = True
    timeout_ms: int = 5000

    def __post_init__(self) -> None:
        _require_int("TimeoutConfig", "timeout_ms", self.timeout_ms, 1)


@dataclass(frozen=True)
class RetryConfig:
    enabled: bool = True
    max_retries: int = 3
    delay_ms: int = 1000
    wrap_exhausted: bool = False

    def __post_init__(self) -> None:
        _require_int("RetryConfig", "max_retries", self.max_retries, 0)
        _require_int("RetryConfig", "delay_ms", self.delay_ms, 0)


@dataclass(frozen=True)
class CircuitBreakerConfig:
    """Breaker thresholds.

    ``volume_threshold`` is the number of outcomes that must be recorded in
    the current window before the failure rate is evaluated.
    """

    enabled: bool = True
    timeout_ms: int = 10000
    error_threshold_percentage: int = 50
    reset_timeout_ms: int = 30000
    volume_threshold: int = 2
    rolling_window_ms: int = 10000

    def __post_init__(self) -> None:
        _require_int("CircuitBreakerConfig", "timeout_ms", self.timeout_ms, 1)
        _require_int(
            "CircuitBreakerConfig",
            "error_threshold_percentage",
            self.error_threshold_percentage,
            0,
        )
        if self.error_threshold_percentage > 100:
            raise ValidationError(
                "CircuitBreakerConfig.error_threshold_percentage must be <= 100, "
                f"got {self.error_threshold_percentage}",
                details={"field": "error_threshold_percentage"},
            )
        _require_int("CircuitBreakerConfig", "reset_timeout_ms", self.reset_timeout_ms, 1)
        _require_int("CircuitBreakerConfig", "volume_threshold", self.volume_threshold, 1)
        _require_int("CircuitBreakerConfig", "rolling_window_ms", self.rolling_window_ms, 1)


@dataclass(frozen=True)
class FallbackConfig:
    """``fallback_method`` takes no argument, or the failure that triggered it."""

    enabled: bool = True
    fallback_method: Optional[Callable[..., Any]] = None

    def __post_init__(self) -> None:
        if self.fallback_method is not None and not callable(self.fallback_method):
            raise ValidationError(
                "FallbackConfig.fallback_method must be callable",
                details={"field": "fallback_method"},
            )
        if self.enabled and self.fallback_method is None:
            raise ValidationError(
                "FallbackConfig.fallback_method is required when fallback is enabled",
                details={"field": "fallback_method"},
            )


@dataclass(frozen=True)
class ResilienceConfigs:
    """Resolved configuration for every pattern; ``None`` disables a pattern."""

    timeout: Optional[TimeoutConfig] = None
    retry: Optional[RetryConfig] = None
    circuit_breaker: Optional[CircuitBreakerConfig] = None
    fallback: Optional[FallbackConfig] = None

    def __post_init__(self) -> None:
        expected = {
            "timeout": TimeoutConfig,
            "retry": RetryConfig,
            "circuit_breaker": CircuitBreakerConfig,
            "fallback": FallbackConfig,
        }
        for name, config_type in expected.items():
            value = getattr(self, name)
            if value is not None and not isinstance(value, config_type):
                raise ValidationError(
                    f"ResilienceConfigs.{name} must be a {config_type.__name__}",
                    details={"field": name},
                )

    def is_enabled(self, name: str) -> bool:
        config = getattr(self, name)
        return config is not None and config.enabled
