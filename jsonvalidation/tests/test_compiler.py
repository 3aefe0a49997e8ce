"""Schema compilation: diagnostics, type resolution and keyword semantics."""
from __future__ import annotations

import pytest

from jsonvalidation.reporting import error_details
from jsonvalidation.schema import (
    CONCRETE_TYPES,
    JSONObjectValidator,
    JSONType,
    SchemaCompiler,
    compile_schema,
)
from jsonvalidation.validators import ErrorCode, ValidationError


def _compiled(schema) -> JSONObjectValidator:
    result = compile_schema(schema)
    assert result.errors == (), [issue.to_dict() for issue in result.errors]
    assert result.validator is not None
    return result.validator


def _pointers(validator, value):
    with pytest.raises(ValidationError) as info:
        validator.validate(value)
    return [(detail.pointer, detail.code) for detail in error_details(info.value)]


# ---- diagnostics ----------------------------------------------------------


def test_unknown_keyword_is_one_warning() -> None:
    result = compile_schema({"type": "string", "bogusKeyword": 1})
    assert result.succeeded
    assert result.errors == ()
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.keyword == "bogusKeyword"
    assert warning.pointer == "/bogusKeyword"
    assert "bogusKeyword" in warning.message


def test_malformed_keyword_is_an_error() -> None:
    result = compile_schema({"type": "string", "minLength": "oops"})
    assert result.validator is None
    assert not result.succeeded
    assert [(issue.keyword, issue.pointer) for issue in result.errors] == [("minLength", "/minLength")]


def test_non_mapping_schema_fails_at_root() -> None:
    result = compile_schema(["type", "string"])
    assert result.validator is None
    assert len(result.errors) == 1
    assert result.errors[0].keyword is None
    assert result.errors[0].pointer == ""


def test_unknown_type_name_is_an_error() -> None:
    result = compile_schema({"type": "strnig"})
    assert [issue.keyword for issue in result.errors] == ["type"]
    assert "strnig" in result.errors[0].message


def test_compilation_collects_every_error() -> None:
    result = compile_schema(
        {
            "type": "object",
            "maxProperties": "ten",
            "properties": {
                "a": {"minLength": -1},
                "b": {"type": "bogus"},
                "c": {"items": {"type": ["string", 3]}},
            },
        }
    )
    assert result.validator is None
    assert [issue.pointer for issue in result.errors] == [
        "/maxProperties",
        "/properties/a/minLength",
        "/properties/b/type",
        "/properties/c/items/type",
    ]


def test_nested_warnings_carry_their_path() -> None:
    result = compile_schema({"properties": {"email": {"type": "string", "format": "email"}}})
    assert result.succeeded
    assert [(issue.keyword, issue.pointer) for issue in result.warnings] == [("format", "/properties/email/format")]


def test_ref_is_reported_as_unsupported() -> None:
    result = compile_schema({"$ref": "#/definitions/thing", "definitions": {"thing": {}}})
    assert result.succeeded
    assert [issue.keyword for issue in result.warnings] == ["$ref"]


def test_annotations_are_accepted_silently() -> None:
    result = compile_schema(
        {
            "$schema": "http://json-schema.org/draft-04/schema#",
            "id": "urn:example",
            "title": "Thing",
            "description": "A thing",
            "default": None,
            "type": "null",
        }
    )
    assert result.succeeded
    assert result.warnings == ()


def test_inapplicable_type_keyword_warns() -> None:
    result = compile_schema({"type": "string", "minimum": 3})
    assert result.succeeded
    assert [(issue.keyword, issue.pointer) for issue in result.warnings] == [("minimum", "/minimum")]
    assert result.validator.is_valid("x")
    assert not result.validator.is_valid(3)


def test_inapplicable_keyword_is_still_shape_checked() -> None:
    result = compile_schema({"type": "string", "minimum": "three"})
    assert not result.succeeded
    assert [issue.keyword for issue in result.errors] == ["minimum"]


def test_compiler_keeps_no_state_between_calls() -> None:
    compiler = SchemaCompiler()
    assert not compiler.compile({"type": 1}).succeeded
    result = compiler.compile({"type": "string"})
    assert result.succeeded
    assert result.errors == ()
    assert result.warnings == ()


def test_validator_keeps_its_source_schema() -> None:
    schema = {"type": "string"}
    assert compile_schema(schema).validator.schema is schema


# ---- type resolution ------------------------------------------------------


def test_empty_schema_accepts_everything() -> None:
    validator = _compiled({})
    assert validator.type is JSONType.AMBIGUOUS
    assert validator.requires_type is False
    assert validator.candidate_types == CONCRETE_TYPES
    for value in ({}, [], "", 0, 1.5, True, None):
        assert validator.is_valid(value)


def test_single_type_is_required() -> None:
    validator = _compiled({"type": "array"})
    assert validator.type is JSONType.ARRAY
    assert validator.requires_type is True
    assert validator.is_valid([])
    assert _pointers(validator, {}) == [("", "value_has_incorrect_type")]


def test_type_list_resolves_to_ambiguous() -> None:
    validator = _compiled({"type": ["string", "null"], "minLength": 2})
    assert validator.type is JSONType.AMBIGUOUS
    assert validator.requires_type is True
    assert validator.candidate_types == frozenset({JSONType.STRING, JSONType.NULL})
    assert validator.is_valid("ab")
    assert validator.is_valid(None)
    assert not validator.is_valid("a")
    assert not validator.is_valid(1)


def test_type_names_folding_to_one_type_resolve_concretely() -> None:
    validator = _compiled({"type": ["integer", "boolean"]})
    assert validator.type is JSONType.NUMBER
    assert validator.is_valid(True)
    assert validator.is_valid(1.5)


def test_boolean_and_number_fold_together() -> None:
    assert _compiled({"type": "boolean"}).is_valid(3)
    assert _compiled({"type": "number"}).is_valid(False)
    assert not _compiled({"type": "boolean"}).is_valid("true")


def test_integer_requires_integral_values() -> None:
    validator = _compiled({"type": "integer"})
    assert validator.is_valid(3)
    assert validator.is_valid(3.0)
    assert validator.is_valid(True)
    assert _pointers(validator, 3.5) == [("", "value_not_integral")]
    assert _compiled({"type": ["integer", "number"]}).is_valid(3.5)


def test_any_type_accepts_everything() -> None:
    validator = _compiled({"type": "any", "minLength": 2})
    assert validator.type is JSONType.ANY
    assert validator.is_valid(None)
    assert validator.is_valid([1])
    assert not validator.is_valid("a")


def test_untyped_schema_gates_keywords_by_type() -> None:
    validator = _compiled({"minLength": 2})
    assert validator.type is JSONType.AMBIGUOUS
    assert validator.candidate_types == frozenset({JSONType.STRING})
    assert validator.is_valid(5)
    assert validator.is_valid("ab")
    assert not validator.is_valid("a")


def test_untyped_schema_with_several_types_of_keywords() -> None:
    validator = _compiled({"minLength": 2, "minimum": 10})
    assert validator.candidate_types == frozenset({JSONType.STRING, JSONType.NUMBER})
    assert validator.is_valid("ab")
    assert validator.is_valid(11)
    assert validator.is_valid([])
    assert not validator.is_valid("a")
    assert not validator.is_valid(5)


# ---- keyword semantics ----------------------------------------------------


def test_enum_and_const() -> None:
    validator = _compiled({"enum": [1, "a", None]})
    assert validator.is_valid("a")
    assert validator.is_valid(None)
    assert _pointers(validator, 2) == [("", "value_not_in_set")]
    assert _compiled({"const": {"a": [1]}}).is_valid({"a": [1]})
    assert not compile_schema({"enum": []}).succeeded


def test_membership_and_uniqueness_fold_booleans_into_numbers() -> None:
    assert _compiled({"enum": [True]}).is_valid(1)
    assert _compiled({"const": 0}).is_valid(False)
    assert not _compiled({"enum": [True]}).is_valid("true")
    unique = _compiled({"type": "array", "uniqueItems": True})
    assert _pointers(unique, [1, True]) == [("/1", "items_not_unique")]
    assert unique.is_valid([0, True])


def test_combinators() -> None:
    any_of = _compiled({"anyOf": [{"type": "string"}, {"type": "null"}]})
    assert any_of.is_valid("x")
    assert any_of.is_valid(None)
    assert not any_of.is_valid(1)

    one_of = _compiled({"oneOf": [{"minimum": 5}, {"maximum": 10}]})
    assert one_of.is_valid(3)
    assert one_of.is_valid(12)
    assert not one_of.is_valid(7)

    all_of = _compiled({"allOf": [{"minimum": 5}, {"multipleOf": 2}]})
    assert all_of.is_valid(6)
    assert not all_of.is_valid(7)

    negated = _compiled({"not": {"type": "string"}})
    assert negated.is_valid(1)
    assert not negated.is_valid("a")

    result = compile_schema({"oneOf": []})
    assert [issue.keyword for issue in result.errors] == ["oneOf"]


def test_numeric_keywords() -> None:
    exclusive = _compiled({"type": "number", "minimum": 0, "exclusiveMinimum": True})
    assert not exclusive.is_valid(0)
    assert exclusive.is_valid(0.01)

    numeric_bound = _compiled({"exclusiveMaximum": 5})
    assert not numeric_bound.is_valid(5)
    assert numeric_bound.is_valid(4.9)

    tenths = _compiled({"multipleOf": 0.1})
    assert tenths.is_valid(0.3)
    assert not tenths.is_valid(0.35)

    assert [issue.keyword for issue in compile_schema({"exclusiveMinimum": True}).errors] == ["exclusiveMinimum"]
    assert [issue.keyword for issue in compile_schema({"multipleOf": 0}).errors] == ["multipleOf"]


def test_multiple_of_with_huge_integers_fails_cleanly() -> None:
    halves = _compiled({"type": "number", "multipleOf": 0.5})
    assert halves.is_valid(10**400)
    assert _pointers(_compiled({"multipleOf": 0.3}), 10**400 + 1) == [("", "value_not_multiple")]


def test_pattern_must_be_a_valid_regex() -> None:
    result = compile_schema({"pattern": "("})
    assert [issue.keyword for issue in result.errors] == ["pattern"]
    assert _compiled({"pattern": "^a"}).is_valid("abc")


def test_positional_items_and_additional_items() -> None:
    closed = _compiled(
        {"type": "array", "items": [{"type": "string"}, {"type": "number"}], "additionalItems": False}
    )
    assert closed.is_valid(["a", 1])
    assert closed.is_valid(["a"])
    assert not closed.is_valid(["a", 1, 2])
    assert [pointer for pointer, _ in _pointers(closed, [1, "a"])] == ["/0", "/1"]

    open_tail = _compiled({"items": [{"type": "string"}], "additionalItems": {"type": "number"}})
    assert open_tail.is_valid(["a", 1, 2])
    assert _pointers(open_tail, ["a", "b"]) == [("/1", "value_has_incorrect_type")]


def test_additional_items_shape_is_checked() -> None:
    result = compile_schema({"items": [{}], "additionalItems": "no"})
    assert [issue.keyword for issue in result.errors] == ["additionalItems"]


def test_object_keywords() -> None:
    validator = _compiled(
        {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}},
            "patternProperties": {"^x-": {"type": "number"}},
            "additionalProperties": {"type": "boolean"},
            "dependencies": {"credit_card": ["billing_address"], "vip": {"required": ["since"]}},
        }
    )
    assert validator.is_valid({"name": "n", "x-count": 3, "extra": True})
    assert _pointers(validator, {"name": "n", "x-count": "3"}) == [("/x-count", "value_has_incorrect_type")]
    assert _pointers(validator, {"name": "n", "extra": "yes"}) == [("/extra", "value_has_incorrect_type")]
    assert _pointers(validator, {"name": "n", "credit_card": True}) == [("/credit_card", "dependency_not_satisfied")]
    assert _pointers(validator, {"name": "n", "vip": True}) == [("/since", "missing_required_key")]
    assert _pointers(validator, {}) == [("/name", "missing_required_key")]


def test_nested_property_sharing_its_parent_name_keeps_full_pointer() -> None:
    validator = _compiled({"type": "object", "properties": {"a": {"type": "object", "required": ["a"]}}})
    assert _pointers(validator, {"a": {}}) == [("/a/a", "missing_required_key")]
    assert validator.is_valid({"a": {"a": 1}})


def test_closed_object_rejects_unknown_keys() -> None:
    validator = _compiled(
        {"properties": {"a": {}}, "patternProperties": {"^b": {}}, "additionalProperties": False}
    )
    assert validator.is_valid({"a": 1, "bee": 2})
    assert _pointers(validator, {"a": 1, "c": 2}) == [("/c", "unexpected_key")]


def test_required_must_hold_unique_strings() -> None:
    assert [issue.keyword for issue in compile_schema({"required": ["a", "a"]}).errors] == ["required"]
    assert [issue.keyword for issue in compile_schema({"required": "a"}).errors] == ["required"]


def test_property_counts() -> None:
    validator = _compiled({"minProperties": 2})
    with pytest.raises(ValidationError) as info:
        validator.validate({"a": 1})
    assert info.value.code is ErrorCode.KEYED_COLLECTION_VALIDATION_ERROR
    assert len(info.value.underlying_errors) == 1
    assert validator.is_valid("not an object")
