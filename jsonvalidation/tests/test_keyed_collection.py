from __future__ import annotations

from collections import OrderedDict

import pytest

from jsonvalidation.validators import (
    EnumValidator,
    ErrorCode,
    KeyedCollectionValidator,
    KeyValuePairValidator,
    NumberValidator,
    RequiredKeysValidator,
    StringValidator,
    ValidationError,
)


def _error(validator, value) -> ValidationError:
    with pytest.raises(ValidationError) as info:
        validator.validate(value)
    return info.value


def test_unconfigured_validator_accepts_every_mapping() -> None:
    validator = KeyedCollectionValidator()
    assert validator.is_valid({})
    assert validator.is_valid({"a": 1, "b": [None], 3: "x"})
    assert validator.is_valid(OrderedDict(a=1))


def test_non_mapping_is_a_type_error() -> None:
    error = _error(KeyedCollectionValidator(), ["a", "b"])
    assert error.code is ErrorCode.VALUE_HAS_INCORRECT_TYPE
    assert not error.underlying_errors


def test_count_failure_is_one_untagged_error() -> None:
    validator = KeyedCollectionValidator(count_validator=NumberValidator(minimum=2))
    error = _error(validator, {"only": 1})
    assert error.code is ErrorCode.KEYED_COLLECTION_VALIDATION_ERROR
    assert len(error.underlying_errors) == 1
    (count_error,) = error.underlying_errors
    assert count_error.key is None
    assert count_error.code is ErrorCode.VALUE_LESS_THAN_MINIMUM


def test_empty_mapping_only_checks_count() -> None:
    validator = KeyedCollectionValidator(
        key_validators=(StringValidator(maximum_length=1),),
        value_validators=(NumberValidator(),),
        key_value_pair_validators=(KeyValuePairValidator("a", EnumValidator((1,))),),
    )
    assert validator.is_valid({})
    with_count = KeyedCollectionValidator(count_validator=NumberValidator(minimum=1))
    assert not with_count.is_valid({})


def test_all_passes_run_and_report_in_order() -> None:
    validator = KeyedCollectionValidator(
        count_validator=NumberValidator(maximum=1),
        key_validators=(StringValidator(maximum_length=1),),
        value_validators=(NumberValidator(),),
        key_value_pair_validators=(KeyValuePairValidator("b", EnumValidator(("y",))),),
    )
    error = _error(validator, {"abcd": 1, "b": "x"})

    assert error.code is ErrorCode.KEYED_COLLECTION_VALIDATION_ERROR
    assert [(item.key, item.code) for item in error.underlying_errors] == [
        (None, ErrorCode.VALUE_GREATER_THAN_MAXIMUM),
        ("abcd", ErrorCode.LENGTH_GREATER_THAN_MAXIMUM),
        ("b", ErrorCode.VALUE_HAS_INCORRECT_TYPE),
        ("b", ErrorCode.VALUE_NOT_IN_SET),
    ]


def test_key_and_value_errors_follow_mapping_order() -> None:
    validator = KeyedCollectionValidator(value_validators=(NumberValidator(minimum=0),))
    error = _error(validator, {"z": -1, "a": 1, "m": -2})
    assert [item.key for item in error.underlying_errors] == ["z", "m"]


def test_pair_validators_only_apply_to_present_keys() -> None:
    validator = KeyedCollectionValidator(
        key_value_pair_validators=(
            KeyValuePairValidator("age", NumberValidator(minimum=0)),
            KeyValuePairValidator("name", StringValidator(minimum_length=1)),
        )
    )
    assert validator.is_valid({"age": 3})
    error = _error(validator, {"name": "", "age": -1})
    # Pair errors follow declaration order, not mapping order.
    assert [item.key for item in error.underlying_errors] == ["age", "name"]


def test_pair_validators_must_be_key_value_pairs() -> None:
    with pytest.raises(TypeError):
        KeyedCollectionValidator(key_value_pair_validators=(NumberValidator(),))  # type: ignore[arg-type]


def test_key_value_pair_absent_key_passes() -> None:
    validator = KeyValuePairValidator("k", NumberValidator(minimum=10))
    assert validator.is_valid({})
    assert validator.is_valid({"other": 1})
    assert KeyValuePairValidator("k").is_valid({"k": object()})


def test_key_value_pair_failure_is_tagged_with_key() -> None:
    validator = KeyValuePairValidator("k", NumberValidator(minimum=10))
    error = _error(validator, {"k": 3})
    assert error.key == "k"
    assert error.code is ErrorCode.VALUE_LESS_THAN_MINIMUM


def test_nested_failures_build_full_paths() -> None:
    inner = KeyedCollectionValidator(
        key_value_pair_validators=(KeyValuePairValidator("zip", StringValidator(pattern="^[0-9]{5}$")),)
    )
    outer = KeyedCollectionValidator(key_value_pair_validators=(KeyValuePairValidator("address", inner),))
    error = _error(outer, {"address": {"zip": "abc"}})
    assert [path for path, _ in error.iter_leaves()] == [("address", "zip")]


def test_nested_key_with_the_parent_name_keeps_both_levels() -> None:
    inner = KeyedCollectionValidator(key_value_pair_validators=(KeyValuePairValidator("a", RequiredKeysValidator(("a",))),))
    error = _error(inner, {"a": {}})
    assert [path for path, _ in error.iter_leaves()] == [("a", "a")]

    pair = KeyValuePairValidator("a", NumberValidator(minimum=1))
    error = _error(KeyedCollectionValidator(key_value_pair_validators=(pair,)), {"a": 0})
    assert [path for path, _ in error.iter_leaves()] == [("a",)]


def test_validation_is_repeatable() -> None:
    validator = KeyedCollectionValidator(value_validators=(NumberValidator(minimum=0),))
    document = {"a": -1, "b": 2}
    first = _error(validator, document)
    second = _error(validator, document)
    assert first.to_dict() == second.to_dict()
    assert document == {"a": -1, "b": 2}


def test_required_keys_reports_each_missing_key() -> None:
    validator = RequiredKeysValidator(("a", "b", "c"))
    assert validator.is_valid({"a": 1, "b": 2, "c": 3})
    single = _error(validator, {"a": 1, "b": 2})
    assert single.key == "c"
    several = _error(validator, {"b": 2})
    assert [item.key for item in several.underlying_errors] == ["a", "c"]
    assert all(item.code is ErrorCode.MISSING_REQUIRED_KEY for item in several.underlying_errors)
