from __future__ import annotations

from collections import OrderedDict

import pytest

from jsonvalidation.schema import CONCRETE_TYPES, JSONType, TypeValidator, classify
from jsonvalidation.validators import ErrorCode, ValidationError


@pytest.mark.parametrize(
    "value, expected",
    [
        ({}, JSONType.OBJECT),
        (OrderedDict(), JSONType.OBJECT),
        ([], JSONType.ARRAY),
        ((1, 2), JSONType.ARRAY),
        ("", JSONType.STRING),
        (0, JSONType.NUMBER),
        (1.5, JSONType.NUMBER),
        (True, JSONType.NUMBER),
        (None, JSONType.NULL),
        (object(), None),
        ({1, 2}, None),
    ],
)
def test_classify(value, expected) -> None:
    assert classify(value) is expected


def test_number_absorbs_booleans() -> None:
    validator = TypeValidator({JSONType.NUMBER})
    assert validator.is_valid(True)
    assert validator.is_valid(False)
    assert validator.is_valid(3)
    assert validator.is_valid(2.5)
    assert not validator.is_valid("3")


def test_null_rejects_false() -> None:
    validator = TypeValidator({JSONType.NULL})
    assert validator.is_valid(None)
    with pytest.raises(ValidationError) as info:
        validator.validate(False)
    assert info.value.code is ErrorCode.VALUE_HAS_INCORRECT_TYPE
    assert "null" in info.value.description
    assert "number" in info.value.description


def test_any_accepts_everything() -> None:
    validator = TypeValidator({JSONType.ANY})
    for value in ({}, [], "", 0, None, object()):
        assert validator.is_valid(value)


def test_ambiguous_expands_to_candidates() -> None:
    validator = TypeValidator({JSONType.AMBIGUOUS}, ambiguous_candidates={JSONType.STRING, JSONType.NULL})
    assert validator.accepted_types == frozenset({JSONType.STRING, JSONType.NULL})
    assert validator.is_valid("x")
    assert validator.is_valid(None)
    assert not validator.is_valid(1)


def test_ambiguous_without_candidates_accepts_nothing() -> None:
    validator = TypeValidator({JSONType.AMBIGUOUS})
    assert not validator.is_valid("x")
    assert TypeValidator({JSONType.AMBIGUOUS}, CONCRETE_TYPES).is_valid("x")


def test_unknown_values_fail_instead_of_crashing() -> None:
    with pytest.raises(ValidationError) as info:
        TypeValidator({JSONType.STRING}).validate(object())
    assert info.value.description == "Expected string, got object"
