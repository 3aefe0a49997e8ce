"""Validator contract and the structured error type shared by every validator."""
from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

PathSegment = Union[str, int]
ErrorPath = Tuple[PathSegment, ...]


class ErrorCode(str, Enum):
    """Machine-readable failure categories attached to :class:`ValidationError`."""

    VALUE_INVALID = "value_invalid"
    VALUE_NONE = "value_none"
    VALUE_HAS_INCORRECT_TYPE = "value_has_incorrect_type"
    VALUE_LESS_THAN_MINIMUM = "value_less_than_minimum"
    VALUE_GREATER_THAN_MAXIMUM = "value_greater_than_maximum"
    VALUE_NOT_INTEGRAL = "value_not_integral"
    VALUE_NOT_MULTIPLE = "value_not_multiple"
    LENGTH_LESS_THAN_MINIMUM = "length_less_than_minimum"
    LENGTH_GREATER_THAN_MAXIMUM = "length_greater_than_maximum"
    VALUE_DOES_NOT_MATCH_PATTERN = "value_does_not_match_pattern"
    VALUE_NOT_IN_SET = "value_not_in_set"
    COMPOUND_VALIDATION_ERROR = "compound_validation_error"
    COLLECTION_VALIDATION_ERROR = "collection_validation_error"
    KEYED_COLLECTION_VALIDATION_ERROR = "keyed_collection_validation_error"
    MISSING_REQUIRED_KEY = "missing_required_key"
    UNEXPECTED_KEY = "unexpected_key"
    ITEMS_NOT_UNIQUE = "items_not_unique"
    DEPENDENCY_NOT_SATISFIED = "dependency_not_satisfied"
    JSON_VALUE_VALIDATION_ERROR = "json_value_validation_error"


class ValidationError(Exception):
    """Structured failure raised by :meth:`Validator.validate`.

    ``key`` is the path segment (mapping key or sequence index) that locates the
    failure inside its parent, ``underlying_errors`` holds the nested failures
    of aggregating validators. Walking the tree from the root yields full paths.
    """

    def __init__(
        self,
        description: str,
        *,
        code: ErrorCode = ErrorCode.VALUE_INVALID,
        value: Any = None,
        key: Optional[PathSegment] = None,
        underlying_errors: Iterable["ValidationError"] = (),
    ) -> None:
        super().__init__(description)
        self.description = description
        self.code = code
        self.value = value
        self.key = key
        self.underlying_errors: Tuple[ValidationError, ...] = tuple(underlying_errors)

    def __repr__(self) -> str:
        return (
            f"ValidationError({self.description!r}, code={self.code.value!r}, "
            f"key={self.key!r}, underlying={len(self.underlying_errors)})"
        )

    def at(self, segment: PathSegment) -> "ValidationError":
        """Return this error located at ``segment`` inside its parent."""
        if self.key is None:
            return ValidationError(
                self.description,
                code=self.code,
                value=self.value,
                key=segment,
                underlying_errors=self.underlying_errors,
            )
        return ValidationError(
            self.description,
            code=self.code,
            value=self.value,
            key=segment,
            underlying_errors=(self,),
        )

    def iter_leaves(self, prefix: ErrorPath = ()) -> Iterator[Tuple[ErrorPath, "ValidationError"]]:
        """Yield ``(path, error)`` for every leaf failure in the tree."""
        path = prefix if self.key is None else prefix + (self.key,)
        if not self.underlying_errors:
            yield path, self
            return
        for error in self.underlying_errors:
            yield from error.iter_leaves(path)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"description": self.description, "code": self.code.value}
        if self.key is not None:
            payload["key"] = self.key
        if self.underlying_errors:
            payload["underlying_errors"] = [error.to_dict() for error in self.underlying_errors]
        return payload


class Validator(abc.ABC):
    """A stateless check over a single value.

    Validators are immutable once constructed. Copying one returns the same
    instance, and instances may be shared freely between threads.
    """

    @abc.abstractmethod
    def validate(self, value: Any) -> None:
        """Raise :class:`ValidationError` when ``value`` is invalid."""

    def is_valid(self, value: Any) -> bool:
        try:
            self.validate(value)
        except ValidationError:
            return False
        return True

    def __copy__(self) -> "Validator":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Validator":
        return self


def collect_errors(
    validators: Iterable[Validator],
    value: Any,
    key: Optional[PathSegment] = None,
) -> List[ValidationError]:
    """Run every validator on ``value`` and return all failures, tagged with ``key``."""
    errors: List[ValidationError] = []
    for validator in validators:
        try:
            validator.validate(value)
        except ValidationError as exc:
            errors.append(exc if key is None else exc.at(key))
    return errors


@dataclass(frozen=True)
class BlockValidator(Validator):
    """Adapt a predicate callable to the validator contract."""

    predicate: Callable[[Any], bool]
    description: str = "Value failed custom validation"

    def validate(self, value: Any) -> None:
        if not self.predicate(value):
            raise ValidationError(self.description, value=value)


__all__ = [
    "BlockValidator",
    "ErrorCode",
    "ErrorPath",
    "PathSegment",
    "ValidationError",
    "Validator",
    "collect_errors",
]
