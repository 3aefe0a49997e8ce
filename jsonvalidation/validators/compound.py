"""Logical composition of validators."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .base import ErrorCode, ValidationError, Validator, collect_errors


class CompoundValidatorType(str, Enum):
    AND = "and"
    OR = "or"
    NOT = "not"
    MUTUAL_EXCLUSION = "mutual_exclusion"


@dataclass(frozen=True)
class CompoundValidator(Validator):
    """Combine sub-validators with a logical operator.

    AND passes when every sub-validator passes, OR when at least one does,
    MUTUAL_EXCLUSION when exactly one does, and NOT when its single
    sub-validator fails. An empty AND passes; an empty OR or MUTUAL_EXCLUSION
    fails.
    """

    compound_type: CompoundValidatorType
    subvalidators: Tuple[Validator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "subvalidators", tuple(self.subvalidators))
        if self.compound_type is CompoundValidatorType.NOT and len(self.subvalidators) != 1:
            raise ValueError("a NOT validator takes exactly one subvalidator")

    @classmethod
    def and_validator(cls, validators: Iterable[Validator]) -> "CompoundValidator":
        return cls(CompoundValidatorType.AND, tuple(validators))

    @classmethod
    def or_validator(cls, validators: Iterable[Validator]) -> "CompoundValidator":
        return cls(CompoundValidatorType.OR, tuple(validators))

    @classmethod
    def not_validator(cls, validator: Validator) -> "CompoundValidator":
        return cls(CompoundValidatorType.NOT, (validator,))

    @classmethod
    def mutual_exclusion_validator(cls, validators: Iterable[Validator]) -> "CompoundValidator":
        return cls(CompoundValidatorType.MUTUAL_EXCLUSION, tuple(validators))

    def validate(self, value: Any) -> None:
        if self.compound_type is CompoundValidatorType.NOT:
            if self.subvalidators[0].is_valid(value):
                raise ValidationError(
                    "Value must not pass the negated validator",
                    code=ErrorCode.COMPOUND_VALIDATION_ERROR,
                    value=value,
                )
            return

        errors = collect_errors(self.subvalidators, value)
        passed = len(self.subvalidators) - len(errors)

        if self.compound_type is CompoundValidatorType.AND:
            if len(errors) == 1:
                raise errors[0]
            if errors:
                self._fail(value, f"Value failed {len(errors)} of {len(self.subvalidators)} validators", errors)
        elif self.compound_type is CompoundValidatorType.OR:
            if passed == 0:
                self._fail(value, "Value did not pass any of the alternatives", errors)
        elif passed != 1:
            if passed == 0:
                self._fail(value, "Value did not pass exactly one alternative; it passed none", errors)
            self._fail(value, f"Value must pass exactly one alternative; it passed {passed}", [])

    @staticmethod
    def _fail(value: Any, description: str, errors: List[ValidationError]) -> None:
        raise ValidationError(
            description,
            code=ErrorCode.COMPOUND_VALIDATION_ERROR,
            value=value,
            underlying_errors=errors,
        )


def combine_all(validators: Sequence[Validator]) -> Optional[Validator]:
    """Collapse validators into one AND validator, or None when there are none."""
    if not validators:
        return None
    if len(validators) == 1:
        return validators[0]
    return CompoundValidator.and_validator(validators)


__all__ = ["CompoundValidator", "CompoundValidatorType", "combine_all"]
