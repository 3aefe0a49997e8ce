"""Array keyword validators that have no generic collection counterpart."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from jsonvalidation.validators.base import ErrorCode, ValidationError, Validator, collect_errors
from jsonvalidation.validators.collections import require_sequence


@dataclass(frozen=True)
class PositionalItemsValidator(Validator):
    """Tuple-style ``items``: one validator per position, then ``additionalItems``."""

    item_validators: Tuple[Optional[Validator], ...] = ()
    additional_items_validator: Optional[Validator] = None
    allows_additional_items: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_validators", tuple(self.item_validators))

    def validate(self, value: Any) -> None:
        require_sequence(value)
        errors: List[ValidationError] = []
        positional = len(self.item_validators)
        for index, element in enumerate(value):
            if index < positional:
                validator = self.item_validators[index]
            else:
                validator = self.additional_items_validator
            if validator is not None:
                errors.extend(collect_errors([validator], element, index))
        if not self.allows_additional_items and len(value) > positional:
            errors.append(
                ValidationError(
                    f"Array has {len(value)} items but allows at most {positional}",
                    code=ErrorCode.LENGTH_GREATER_THAN_MAXIMUM,
                    value=len(value),
                )
            )
        if errors:
            raise ValidationError(
                f"Array failed validation with {len(errors)} error(s)",
                code=ErrorCode.COLLECTION_VALIDATION_ERROR,
                value=value,
                underlying_errors=errors,
            )


@dataclass(frozen=True)
class UniqueItemsValidator(Validator):
    def validate(self, value: Any) -> None:
        require_sequence(value)
        errors: List[ValidationError] = []
        # Items may be unhashable (objects, arrays), so compare pairwise.
        for index, element in enumerate(value):
            for earlier in range(index):
                if value[earlier] == element:
                    errors.append(
                        ValidationError(
                            f"Item duplicates the item at index {earlier}",
                            code=ErrorCode.ITEMS_NOT_UNIQUE,
                            value=element,
                            key=index,
                        )
                    )
                    break
        if errors:
            raise ValidationError(
                "Array items are not unique",
                code=ErrorCode.ITEMS_NOT_UNIQUE,
                value=value,
                underlying_errors=errors,
            )


__all__ = ["PositionalItemsValidator", "UniqueItemsValidator"]
