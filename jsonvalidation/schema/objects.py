"""Object keyword validators built on top of keyed collection validation."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Pattern, Tuple, Union

from jsonvalidation.validators.base import ErrorCode, ValidationError, Validator, collect_errors
from jsonvalidation.validators.keyed import require_mapping


def _compile_patterns(patterns: Tuple[str, ...]) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern) for pattern in patterns)


def _raise_aggregate(value: Any, errors: List[ValidationError]) -> None:
    raise ValidationError(
        f"Object failed validation with {len(errors)} error(s)",
        code=ErrorCode.KEYED_COLLECTION_VALIDATION_ERROR,
        value=value,
        underlying_errors=errors,
    )


@dataclass(frozen=True)
class AllowedKeysValidator(Validator):
    """Key validator for ``additionalProperties: false``."""

    known_keys: FrozenSet[str] = frozenset()
    patterns: Tuple[str, ...] = ()
    regexes: Tuple[Pattern[str], ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "known_keys", frozenset(self.known_keys))
        object.__setattr__(self, "patterns", tuple(self.patterns))
        object.__setattr__(self, "regexes", _compile_patterns(self.patterns))

    def allows(self, key: Any) -> bool:
        if key in self.known_keys:
            return True
        return isinstance(key, str) and any(regex.search(key) for regex in self.regexes)

    def validate(self, value: Any) -> None:
        if not self.allows(value):
            raise ValidationError(f"Unexpected key {value!r}", code=ErrorCode.UNEXPECTED_KEY, value=value)


@dataclass(frozen=True)
class PatternPropertiesValidator(Validator):
    """Validate the value of every key matching a pattern."""

    pattern_validators: Tuple[Tuple[str, Validator], ...] = ()
    regexes: Tuple[Pattern[str], ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern_validators", tuple(self.pattern_validators))
        patterns = tuple(pattern for pattern, _ in self.pattern_validators)
        object.__setattr__(self, "regexes", _compile_patterns(patterns))

    def validate(self, value: Any) -> None:
        require_mapping(value)
        errors: List[ValidationError] = []
        for key, item in value.items():
            if not isinstance(key, str):
                continue
            for regex, (_, validator) in zip(self.regexes, self.pattern_validators):
                if regex.search(key):
                    errors.extend(collect_errors([validator], item, key))
        if errors:
            _raise_aggregate(value, errors)


@dataclass(frozen=True)
class AdditionalPropertiesValidator(Validator):
    """Validate the values of keys not covered by ``properties`` or ``patternProperties``."""

    allowed_keys: AllowedKeysValidator
    value_validator: Validator

    def validate(self, value: Any) -> None:
        require_mapping(value)
        errors: List[ValidationError] = []
        for key, item in value.items():
            if not self.allowed_keys.allows(key):
                errors.extend(collect_errors([self.value_validator], item, key))
        if errors:
            _raise_aggregate(value, errors)


Dependency = Union[Tuple[str, ...], Validator]


@dataclass(frozen=True)
class DependenciesValidator(Validator):
    """When a key is present, require other keys or validate the whole object."""

    dependencies: Tuple[Tuple[str, Dependency], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def validate(self, value: Any) -> None:
        require_mapping(value)
        errors: List[ValidationError] = []
        for key, dependency in self.dependencies:
            if key not in value:
                continue
            if isinstance(dependency, Validator):
                try:
                    dependency.validate(value)
                except ValidationError as exc:
                    errors.append(
                        ValidationError(
                            f"Object does not satisfy the schema required by key {key!r}",
                            code=ErrorCode.DEPENDENCY_NOT_SATISFIED,
                            value=value,
                            underlying_errors=(exc,),
                        )
                    )
                continue
            for required in dependency:
                if required not in value:
                    errors.append(
                        ValidationError(
                            f"Key {key!r} requires key {required!r}",
                            code=ErrorCode.DEPENDENCY_NOT_SATISFIED,
                            key=key,
                        )
                    )
        if len(errors) == 1:
            raise errors[0]
        if errors:
            _raise_aggregate(value, errors)


__all__ = [
    "AdditionalPropertiesValidator",
    "AllowedKeysValidator",
    "DependenciesValidator",
    "PatternPropertiesValidator",
]
