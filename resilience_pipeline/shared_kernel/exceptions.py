"""Shared kernel exception hierarchy."""
from typing import Optional, Dict, Any


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ValidationError(DomainException):
    """Raised when a resilience configuration is invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="INVALID_CONFIG", details=details)


class ExternalServiceError(DomainException):
    """Raised when a protected downstream call fails."""


class OperationTimeoutError(ExternalServiceError):
    """Raised when an operation does not settle before its deadline."""

    def __init__(self, timeout_ms: int, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Operation timed out after {timeout_ms}ms",
            code="TIMEOUT",
            details={"timeout_ms": timeout_ms},
        )
        self.timeout_ms = timeout_ms


class CircuitOpenError(ExternalServiceError):
    """Raised when a circuit breaker is open."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Circuit {name} is open",
            code="CIRCUIT_OPEN",
            details={"circuit": name},
        )
        self.name = name


class RetryExhaustedError(ExternalServiceError):
    """Raised when every retry attempt failed and wrapping is requested."""

    def __init__(self, last_error: BaseException, attempts: int) -> None:
        super().__init__(
            f"Operation failed after {attempts} attempts: {last_error}",
            code="RETRY_EXHAUSTED",
            details={"attempts": attempts},
        )
        self.last_error = last_error
        self.attempts = attempts
