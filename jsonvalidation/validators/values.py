"""Leaf validators for scalar values."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Optional, Pattern, Tuple

from .base import ErrorCode, ValidationError, Validator

_NUMERIC_TYPES = (int, float)


def is_number(value: Any) -> bool:
    """Booleans count as numbers, matching the JSON type model used here."""
    return isinstance(value, _NUMERIC_TYPES)


def _is_integral(value: Any) -> bool:
    if isinstance(value, int):
        return True
    return math.isfinite(value) and float(value).is_integer()


def _exact(number: Any) -> Fraction:
    # repr gives the shortest decimal that round-trips, i.e. the literal from the document.
    return Fraction(repr(number)) if isinstance(number, float) else Fraction(number)


def _is_multiple(value: Any, divisor: Any) -> bool:
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    try:
        quotient = value / divisor
    except OverflowError:
        if isinstance(value, float) and not math.isfinite(value):
            return False
        return (_exact(value) / _exact(divisor)).denominator == 1
    if not math.isfinite(quotient):
        return False
    return math.isclose(quotient, round(quotient), rel_tol=1e-9, abs_tol=1e-9)


@dataclass(frozen=True)
class ValueValidator(Validator):
    """Checks a value's Python type and whether ``None`` is acceptable."""

    value_types: Tuple[type, ...] = ()
    allows_none: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "value_types", tuple(self.value_types))

    def validate(self, value: Any) -> None:
        if value is None:
            if self.allows_none:
                return
            raise ValidationError("Value must not be null", code=ErrorCode.VALUE_NONE, value=value)
        if self.value_types and not isinstance(value, self.value_types):
            expected = ", ".join(sorted(kind.__name__ for kind in self.value_types))
            raise ValidationError(
                f"Expected a value of type {expected}, got {type(value).__name__}",
                code=ErrorCode.VALUE_HAS_INCORRECT_TYPE,
                value=value,
            )


@dataclass(frozen=True)
class NumberValidator(Validator):
    """Numeric bounds, integrality and divisibility."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    requires_integral: bool = False
    multiple_of: Optional[float] = None

    def __post_init__(self) -> None:
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError("minimum must be <= maximum")
        if self.multiple_of is not None and not self.multiple_of > 0:
            raise ValueError("multiple_of must be greater than zero")

    def validate(self, value: Any) -> None:
        if not is_number(value):
            raise ValidationError(
                f"Expected a number, got {type(value).__name__}",
                code=ErrorCode.VALUE_HAS_INCORRECT_TYPE,
                value=value,
            )
        if self.minimum is not None:
            if value < self.minimum or (self.exclusive_minimum and value == self.minimum):
                qualifier = "greater than" if self.exclusive_minimum else "at least"
                raise ValidationError(
                    f"{value!r} must be {qualifier} {self.minimum!r}",
                    code=ErrorCode.VALUE_LESS_THAN_MINIMUM,
                    value=value,
                )
        if self.maximum is not None:
            if value > self.maximum or (self.exclusive_maximum and value == self.maximum):
                qualifier = "less than" if self.exclusive_maximum else "at most"
                raise ValidationError(
                    f"{value!r} must be {qualifier} {self.maximum!r}",
                    code=ErrorCode.VALUE_GREATER_THAN_MAXIMUM,
                    value=value,
                )
        if self.requires_integral and not _is_integral(value):
            raise ValidationError(
                f"{value!r} is not an integer", code=ErrorCode.VALUE_NOT_INTEGRAL, value=value
            )
        if self.multiple_of is not None and not _is_multiple(value, self.multiple_of):
            raise ValidationError(
                f"{value!r} is not a multiple of {self.multiple_of!r}",
                code=ErrorCode.VALUE_NOT_MULTIPLE,
                value=value,
            )


@dataclass(frozen=True)
class StringValidator(Validator):
    """Length bounds (in code points) and an unanchored regular expression."""

    minimum_length: Optional[int] = None
    maximum_length: Optional[int] = None
    pattern: Optional[str] = None
    regex: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in ("minimum_length", "maximum_length"):
            bound = getattr(self, name)
            if bound is not None and bound < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.pattern is not None:
            object.__setattr__(self, "regex", re.compile(self.pattern))

    def validate(self, value: Any) -> None:
        if not isinstance(value, str):
            raise ValidationError(
                f"Expected a string, got {type(value).__name__}",
                code=ErrorCode.VALUE_HAS_INCORRECT_TYPE,
                value=value,
            )
        length = len(value)
        if self.minimum_length is not None and length < self.minimum_length:
            raise ValidationError(
                f"String length {length} is shorter than {self.minimum_length}",
                code=ErrorCode.LENGTH_LESS_THAN_MINIMUM,
                value=value,
            )
        if self.maximum_length is not None and length > self.maximum_length:
            raise ValidationError(
                f"String length {length} is longer than {self.maximum_length}",
                code=ErrorCode.LENGTH_GREATER_THAN_MAXIMUM,
                value=value,
            )
        if self.regex is not None and self.regex.search(value) is None:
            raise ValidationError(
                f"{value!r} does not match pattern {self.pattern!r}",
                code=ErrorCode.VALUE_DOES_NOT_MATCH_PATTERN,
                value=value,
            )


@dataclass(frozen=True)
class EnumValidator(Validator):
    """Membership in a fixed set of values, compared with ``==``."""

    values: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def validate(self, value: Any) -> None:
        for candidate in self.values:
            if value == candidate:
                return
        raise ValidationError(
            f"{value!r} is not one of {list(self.values)!r}",
            code=ErrorCode.VALUE_NOT_IN_SET,
            value=value,
        )


__all__ = [
    "EnumValidator",
    "NumberValidator",
    "StringValidator",
    "ValueValidator",
    "is_number",
]
