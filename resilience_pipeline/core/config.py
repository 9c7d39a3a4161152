"""
Configuration settings for the resilience pipeline
"""
from typing import Any, Callable, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from resilience_pipeline.infrastructure.resilience.config import (
    CircuitBreakerConfig,
    FallbackConfig,
    ResilienceConfigs,
    RetryConfig,
    TimeoutConfig,
)


class Settings(BaseSettings):
    """Application settings"""

    # Project Info
    PROJECT_NAME: str = "resilience-pipeline"
    VERSION: str = "1.0.0"

    # Timeout
    RESILIENCE_TIMEOUT_ENABLED: bool = Field(default=True)
    RESILIENCE_TIMEOUT_MS: int = Field(default=5000)

    # Retry
    RESILIENCE_RETRY_ENABLED: bool = Field(default=True)
    RESILIENCE_RETRY_MAX_RETRIES: int = Field(default=3)
    RESILIENCE_RETRY_DELAY_MS: int = Field(default=1000)
    RESILIENCE_RETRY_WRAP_EXHAUSTED: bool = Field(default=False)

    # Circuit Breaker
    RESILIENCE_CIRCUIT_BREAKER_ENABLED: bool = Field(default=True)
    RESILIENCE_CIRCUIT_BREAKER_TIMEOUT_MS: int = Field(default=10000)
    RESILIENCE_CIRCUIT_BREAKER_ERROR_THRESHOLD_PERCENTAGE: int = Field(default=50)
    RESILIENCE_CIRCUIT_BREAKER_RESET_TIMEOUT_MS: int = Field(default=30000)
    RESILIENCE_CIRCUIT_BREAKER_VOLUME_THRESHOLD: int = Field(default=2)
    RESILIENCE_CIRCUIT_BREAKER_ROLLING_WINDOW_MS: int = Field(default=10000)

    # Fallback (the method itself is supplied in code)
    RESILIENCE_FALLBACK_ENABLED: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True)

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only standard logging level names"""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported LOG_LEVEL: {v}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    def to_resilience_configs(
        self, fallback_method: Optional[Callable[..., Any]] = None
    ) -> ResilienceConfigs:
        """Build validated per-pattern configs; invalid values raise ValidationError."""
        fallback = None
        if self.RESILIENCE_FALLBACK_ENABLED:
            # Raises ValidationError when no method is supplied.
            fallback = FallbackConfig(enabled=True, fallback_method=fallback_method)

        return ResilienceConfigs(
            timeout=TimeoutConfig(
                enabled=self.RESILIENCE_TIMEOUT_ENABLED,
                timeout_ms=self.RESILIENCE_TIMEOUT_MS,
            ),
            retry=RetryConfig(
                enabled=self.RESILIENCE_RETRY_ENABLED,
                max_retries=self.RESILIENCE_RETRY_MAX_RETRIES,
                delay_ms=self.RESILIENCE_RETRY_DELAY_MS,
                wrap_exhausted=self.RESILIENCE_RETRY_WRAP_EXHAUSTED,
            ),
            circuit_breaker=CircuitBreakerConfig(
                enabled=self.RESILIENCE_CIRCUIT_BREAKER_ENABLED,
                timeout_ms=self.RESILIENCE_CIRCUIT_BREAKER_TIMEOUT_MS,
                error_threshold_percentage=self.RESILIENCE_CIRCUIT_BREAKER_ERROR_THRESHOLD_PERCENTAGE,
                reset_timeout_ms=self.RESILIENCE_CIRCUIT_BREAKER_RESET_TIMEOUT_MS,
                volume_threshold=self.RESILIENCE_CIRCUIT_BREAKER_VOLUME_THRESHOLD,
                rolling_window_ms=self.RESILIENCE_CIRCUIT_BREAKER_ROLLING_WINDOW_MS,
            ),
            fallback=fallback,
        )


# Create settings instance
settings = Settings()
