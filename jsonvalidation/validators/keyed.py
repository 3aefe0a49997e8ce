"""Keyed collection validation: count, keys, values and specific key-value pairs.

A :class:`KeyedCollectionValidator` evaluates every constraint it holds and
reports all failures at once, in a stable order: the count error first, then
key errors and value errors in the mapping's iteration order, then key-value
pair errors in declaration order. Constraints that are not configured impose
nothing, so an unconfigured validator accepts every mapping.

Presence of a key is not this module's concern beyond
:class:`RequiredKeysValidator`; a :class:`KeyValuePairValidator` whose key is
missing from the mapping passes.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Hashable, List, Optional, Tuple

from .base import ErrorCode, ValidationError, Validator, collect_errors


def require_mapping(value: Any) -> None:
    if not isinstance(value, Mapping):
        raise ValidationError(
            f"Expected an object, got {type(value).__name__}",
            code=ErrorCode.VALUE_HAS_INCORRECT_TYPE,
            value=value,
        )


@dataclass(frozen=True)
class KeyValuePairValidator(Validator):
    """Validate the value stored under one key, when that key is present."""

    key: Hashable
    value_validator: Optional[Validator] = None

    def validate(self, value: Any) -> None:
        require_mapping(value)
        if self.key not in value or self.value_validator is None:
            return
        try:
            self.value_validator.validate(value[self.key])
        except ValidationError as exc:
            raise exc.at(self.key) from None


@dataclass(frozen=True)
class KeyedCollectionValidator(Validator):
    count_validator: Optional[Validator] = None
    key_validators: Tuple[Validator, ...] = ()
    value_validators: Tuple[Validator, ...] = ()
    key_value_pair_validators: Tuple[KeyValuePairValidator, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_validators", tuple(self.key_validators or ()))
        object.__setattr__(self, "value_validators", tuple(self.value_validators or ()))
        pairs = tuple(self.key_value_pair_validators or ())
        for pair in pairs:
            if not isinstance(pair, KeyValuePairValidator):
                raise TypeError(
                    f"key_value_pair_validators must be KeyValuePairValidator instances, got {type(pair).__name__}"
                )
        object.__setattr__(self, "key_value_pair_validators", pairs)

    def validate(self, value: Any) -> None:
        require_mapping(value)
        errors: List[ValidationError] = []

        if self.count_validator is not None:
            errors.extend(collect_errors([self.count_validator], len(value)))

        if self.key_validators:
            for key in value:
                errors.extend(collect_errors(self.key_validators, key, key))

        if self.value_validators:
            for key, item in value.items():
                errors.extend(collect_errors(self.value_validators, item, key))

        for pair in self.key_value_pair_validators:
            if pair.key in value:
                errors.extend(collect_errors([pair], value))

        if errors:
            raise ValidationError(
                f"Object failed validation with {len(errors)} error(s)",
                code=ErrorCode.KEYED_COLLECTION_VALIDATION_ERROR,
                value=value,
                underlying_errors=errors,
            )


@dataclass(frozen=True)
class RequiredKeysValidator(Validator):
    """Every listed key must be present; each missing key is its own error."""

    keys: Tuple[Hashable, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))

    def validate(self, value: Any) -> None:
        require_mapping(value)
        missing = [key for key in self.keys if key not in value]
        if not missing:
            return
        errors = [
            ValidationError(
                f"Missing required key {key!r}",
                code=ErrorCode.MISSING_REQUIRED_KEY,
                key=key,
            )
            for key in missing
        ]
        if len(errors) == 1:
            raise errors[0]
        raise ValidationError(
            f"Missing {len(missing)} required keys",
            code=ErrorCode.MISSING_REQUIRED_KEY,
            value=value,
            underlying_errors=errors,
        )


__all__ = [
    "KeyValuePairValidator",
    "KeyedCollectionValidator",
    "RequiredKeysValidator",
    "require_mapping",
]
