"""Structural validation for raw schedule data.

This module is the single source of truth for what a well-formed schedule
payload looks like. Every payload is validated before it is wrapped in an
``AssignmentGrid``; nothing downstream reads raw schedule data.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pitboss.domain.calendar import TimeSlotCalendar
from pitboss.domain.models import ShiftType

METADATA_PREFIX = "_"


def is_metadata_key(key: Any) -> bool:
    """Keys such as ``_preferences`` carry metadata, not slots."""
    return isinstance(key, str) and key.startswith(METADATA_PREFIX)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    MISSING_DATA = "missing_data"
    NOT_A_MAPPING = "not_a_mapping"
    MALFORMED_SLOT = "malformed_slot"
    UNKNOWN_SLOT = "unknown_slot"


class ValidationError(Exception):
    """A schedule payload that cannot be used.

    Attributes:
        error_type: What is wrong with the payload.
        message: Human-readable description.
        slot: Offending slot key, if any.
        dealer_id: Offending dealer id, if any.
        details: Extra context for logs.
    """

    def __init__(
        self,
        error_type: ValidationErrorType,
        message: str,
        slot: Optional[str] = None,
        dealer_id: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.slot = slot
        self.dealer_id = dealer_id
        self.details = details or {}

    @property
    def is_missing(self) -> bool:
        return self.error_type is ValidationErrorType.MISSING_DATA

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.dealer_id:
            parts.append(f"Dealer {self.dealer_id}:")
        parts.append(self.message)
        if self.slot is not None:
            parts.append(f"(slot {self.slot})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a schedule payload."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class GridValidator:
    """Validates raw schedule payloads against the slot calendar.

    Example:
        >>> validator = GridValidator()
        >>> result = validator.validate(raw, ShiftType.DAY)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(self, calendar: Optional[TimeSlotCalendar] = None):
        self.calendar = calendar or TimeSlotCalendar()

    def validate(self, raw: Any, shift_type: ShiftType) -> ValidationResult:
        """Validate a payload, collecting every error.

        Args:
            raw: The ``schedule_data`` value from the store.
            shift_type: Shift the schedule belongs to.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        if raw is None:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.MISSING_DATA,
                    message="Schedule has no data",
                )
            )
            return result

        if not isinstance(raw, Mapping):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.NOT_A_MAPPING,
                    message=f"Schedule data is a {type(raw).__name__}, not a mapping",
                )
            )
            return result

        known_slots = set(self.calendar.slot_times(shift_type))
        for slot, assignments in raw.items():
            if is_metadata_key(slot):
                continue
            if slot not in known_slots:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_SLOT,
                        message=f"Slot is not part of the {ShiftType(shift_type).value} shift",
                        slot=str(slot),
                    )
                )
                continue
            self._validate_slot(slot, assignments, result)

        if result.is_valid and not any(
            raw[slot] for slot in raw if not is_metadata_key(slot)
        ):
            result.add_warning("Schedule contains no assignments")

        return result

    def _validate_slot(self, slot: str, assignments: Any, result: ValidationResult) -> None:
        """Validate the dealer -> activity mapping of a single slot."""
        if not isinstance(assignments, Mapping):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.MALFORMED_SLOT,
                    message=f"Slot holds a {type(assignments).__name__}, not a mapping",
                    slot=slot,
                )
            )
            return

        for dealer_id, code in assignments.items():
            if code is not None and not isinstance(code, str):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.MALFORMED_SLOT,
                        message=f"Activity code is a {type(code).__name__}, not a string",
                        slot=slot,
                        dealer_id=str(dealer_id),
                        details={"value": repr(code)},
                    )
                )

    def check(self, raw: Any, shift_type: ShiftType) -> None:
        """Raise the first validation error, if any.

        Raises:
            ValidationError: If the payload is missing or malformed.
        """
        result = self.validate(raw, shift_type)
        if not result.is_valid:
            raise result.errors[0]
