"""Validators for ordered collections (JSON arrays)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .base import ErrorCode, ValidationError, Validator, collect_errors

SEQUENCE_TYPES = (list, tuple)


def require_sequence(value: Any) -> None:
    if not isinstance(value, SEQUENCE_TYPES):
        raise ValidationError(
            f"Expected an array, got {type(value).__name__}",
            code=ErrorCode.VALUE_HAS_INCORRECT_TYPE,
            value=value,
        )


@dataclass(frozen=True)
class CollectionValidator(Validator):
    """Validate an array's length and every element.

    Every element is checked by every element validator; failures are tagged
    with the element index and reported together.
    """

    count_validator: Optional[Validator] = None
    element_validators: Tuple[Validator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "element_validators", tuple(self.element_validators or ()))

    def validate(self, value: Any) -> None:
        require_sequence(value)
        errors: List[ValidationError] = []
        if self.count_validator is not None:
            errors.extend(collect_errors([self.count_validator], len(value)))
        for index, element in enumerate(value):
            errors.extend(collect_errors(self.element_validators, element, index))
        if errors:
            raise ValidationError(
                f"Array failed validation with {len(errors)} error(s)",
                code=ErrorCode.COLLECTION_VALIDATION_ERROR,
                value=value,
                underlying_errors=errors,
            )


__all__ = ["CollectionValidator", "SEQUENCE_TYPES", "require_sequence"]
