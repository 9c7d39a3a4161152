"""Shared kernel primitives (errors, outcomes)."""

from .exceptions import (
    DomainException,
    ValidationError,
    ExternalServiceError,
    OperationTimeoutError,
    CircuitOpenError,
    RetryExhaustedError,
)
from .result import Result

__all__ = [
    "DomainException",
    "ValidationError",
    "ExternalServiceError",
    "OperationTimeoutError",
    "CircuitOpenError",
    "RetryExhaustedError",
    "Result",
]
