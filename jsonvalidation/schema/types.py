"""JSON type classification.

Booleans classify as numbers. The schema vocabulary accepts ``"boolean"`` as a
type name, but it resolves to :attr:`JSONType.NUMBER`, so a schema declaring
``"number"`` accepts ``true`` and one declaring ``"boolean"`` accepts ``3``.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

from jsonvalidation.validators.base import ErrorCode, ValidationError, Validator


class JSONType(str, Enum):
    ANY = "any"
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    NULL = "null"
    AMBIGUOUS = "ambiguous"


CONCRETE_TYPES: FrozenSet[JSONType] = frozenset(
    {JSONType.OBJECT, JSONType.ARRAY, JSONType.STRING, JSONType.NUMBER, JSONType.NULL}
)

# Schema type names and the classification each resolves to.
TYPE_NAMES = {
    "object": JSONType.OBJECT,
    "array": JSONType.ARRAY,
    "string": JSONType.STRING,
    "number": JSONType.NUMBER,
    "integer": JSONType.NUMBER,
    "boolean": JSONType.NUMBER,
    "null": JSONType.NULL,
    "any": JSONType.ANY,
}


def classify(value: Any) -> Optional[JSONType]:
    """Return the JSON classification of ``value``, or None for non-JSON values."""
    if value is None:
        return JSONType.NULL
    if isinstance(value, str):
        return JSONType.STRING
    if isinstance(value, (bool, int, float)):
        return JSONType.NUMBER
    if isinstance(value, Mapping):
        return JSONType.OBJECT
    if isinstance(value, (list, tuple)):
        return JSONType.ARRAY
    return None


def describe_types(types: Iterable[JSONType]) -> str:
    names = sorted(kind.value for kind in types)
    if not names:
        return "nothing"
    if len(names) == 1:
        return names[0]
    return " or ".join(names)


@dataclass(frozen=True)
class TypeValidator(Validator):
    """Accept values whose classification is one of ``types``.

    ``ANY`` accepts everything. ``AMBIGUOUS`` stands for
    ``ambiguous_candidates``, the set of types it was resolved to.
    """

    types: FrozenSet[JSONType]
    ambiguous_candidates: FrozenSet[JSONType] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", frozenset(self.types))
        object.__setattr__(self, "ambiguous_candidates", frozenset(self.ambiguous_candidates))

    @property
    def accepted_types(self) -> FrozenSet[JSONType]:
        if JSONType.ANY in self.types:
            return frozenset({JSONType.ANY})
        accepted = set(self.types - {JSONType.AMBIGUOUS})
        if JSONType.AMBIGUOUS in self.types:
            accepted |= self.ambiguous_candidates - {JSONType.AMBIGUOUS}
        return frozenset(accepted)

    def accepts(self, value: Any) -> bool:
        accepted = self.accepted_types
        return JSONType.ANY in accepted or classify(value) in accepted

    def validate(self, value: Any) -> None:
        if self.accepts(value):
            return
        observed = classify(value)
        observed_name = observed.value if observed is not None else type(value).__name__
        raise ValidationError(
            f"Expected {describe_types(self.accepted_types)}, got {observed_name}",
            code=ErrorCode.VALUE_HAS_INCORRECT_TYPE,
            value=value,
        )


__all__ = [
    "CONCRETE_TYPES",
    "JSONType",
    "TYPE_NAMES",
    "TypeValidator",
    "classify",
    "describe_types",
]
