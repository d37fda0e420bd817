"""Validation module for verifying schedule data."""

from pitboss.validation.validator import (
    GridValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "GridValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
