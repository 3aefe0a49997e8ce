"""Compile JSON schemas into :class:`JSONObjectValidator` trees.

Compilation never raises for a bad schema. Every malformed keyword becomes a
:class:`CompilationIssue` in ``CompilationResult.errors`` and every keyword the
compiler does not understand becomes one in ``CompilationResult.warnings``.
Sibling keywords and nested schemas keep being processed after a failure so
that a single pass reports everything; the result only carries a validator
when no errors were collected.

Type resolution:

* no ``type`` keyword: the validator is AMBIGUOUS and does not require a type.
  Its candidate types are the types whose keywords the schema uses, or every
  type when it uses none;
* one type name: that type, required;
* several type names: AMBIGUOUS over exactly those types, required;
* ``"any"``: ANY.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

import structlog

from jsonvalidation.validators.base import Validator
from jsonvalidation.validators.collections import CollectionValidator
from jsonvalidation.validators.compound import CompoundValidator, combine_all
from jsonvalidation.validators.keyed import (
    KeyedCollectionValidator,
    KeyValuePairValidator,
    RequiredKeysValidator,
)
from jsonvalidation.validators.values import EnumValidator, NumberValidator, StringValidator

from . import keywords as kw
from .arrays import PositionalItemsValidator, UniqueItemsValidator
from .object_validator import JSONObjectValidator
from .objects import (
    AdditionalPropertiesValidator,
    AllowedKeysValidator,
    DependenciesValidator,
    PatternPropertiesValidator,
)
from .types import CONCRETE_TYPES, TYPE_NAMES, JSONType

logger = structlog.get_logger(__name__)

SchemaPath = Tuple[Any, ...]

# Order in which per-type validators are combined for AMBIGUOUS schemas.
_TYPE_ORDER: Tuple[JSONType, ...] = (
    JSONType.OBJECT,
    JSONType.ARRAY,
    JSONType.STRING,
    JSONType.NUMBER,
    JSONType.NULL,
)


def _escape_pointer(segment: Any) -> str:
    return str(segment).replace("~", "~0").replace("/", "~1")


@dataclass(frozen=True)
class CompilationIssue:
    """An error or warning tied to a keyword at a location in the schema."""

    keyword: Optional[str]
    path: SchemaPath
    message: str

    @property
    def pointer(self) -> str:
        """The issue's location as a JSON pointer (``""`` for the root)."""
        return "".join(f"/{_escape_pointer(segment)}" for segment in self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {"keyword": self.keyword, "pointer": self.pointer, "message": self.message}


@dataclass(frozen=True)
class CompilationResult:
    validator: Optional[JSONObjectValidator]
    errors: Tuple[CompilationIssue, ...] = ()
    warnings: Tuple[CompilationIssue, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.validator is not None


class SchemaCompilationError(ValueError):
    """Raised by convenience constructors when a schema fails to compile."""

    def __init__(
        self,
        errors: Sequence[CompilationIssue],
        warnings: Sequence[CompilationIssue] = (),
    ) -> None:
        self.errors = tuple(errors)
        self.warnings = tuple(warnings)
        summary = "; ".join(f"{issue.pointer or '/'}: {issue.message}" for issue in self.errors)
        super().__init__(f"Schema failed to compile with {len(self.errors)} error(s): {summary}")


@dataclass
class _Diagnostics:
    errors: List[CompilationIssue] = field(default_factory=list)
    warnings: List[CompilationIssue] = field(default_factory=list)

    def error(self, path: SchemaPath, keyword: Optional[str], message: str) -> None:
        self.errors.append(CompilationIssue(keyword, path, message))

    def warn(self, path: SchemaPath, keyword: Optional[str], message: str) -> None:
        self.warnings.append(CompilationIssue(keyword, path, message))


@dataclass(frozen=True)
class _DeclaredTypes:
    types: FrozenSet[JSONType]
    integral: bool


def _is_json_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_non_negative_integer(value: Any) -> bool:
    if not _is_json_number(value) or value < 0:
        return False
    return isinstance(value, int) or float(value).is_integer()


class SchemaCompiler:
    """Turns a schema mapping into a validator tree.

    The compiler holds no state between calls; each :meth:`compile` collects
    its diagnostics separately, so one instance can serve concurrent callers.
    """

    def compile(self, schema: Any) -> CompilationResult:
        diagnostics = _Diagnostics()
        validator = self._compile(schema, (), None, diagnostics)
        if diagnostics.errors:
            validator = None
        logger.debug(
            "schema.compiled",
            succeeded=validator is not None,
            errors=len(diagnostics.errors),
            warnings=len(diagnostics.warnings),
        )
        return CompilationResult(validator, tuple(diagnostics.errors), tuple(diagnostics.warnings))

    # ------------------------------------------------------------------
    def _compile(
        self,
        schema: Any,
        path: SchemaPath,
        keyword: Optional[str],
        diagnostics: _Diagnostics,
    ) -> Optional[JSONObjectValidator]:
        if not isinstance(schema, Mapping):
            diagnostics.error(path, keyword, f"Schema must be an object, got {type(schema).__name__}")
            return None

        error_count = len(diagnostics.errors)
        declared = self._declared_types(schema, path, diagnostics)

        for name in schema:
            if name in kw.KNOWN_KEYWORDS:
                continue
            if name in kw.UNSUPPORTED_KEYWORDS:
                message = f"Keyword {name!r} is not supported and was ignored"
            else:
                message = f"Unrecognized keyword {name!r} was ignored"
            diagnostics.warn(path + (name,), name, message)

        common_validator = combine_all(self._common_validators(schema, path, diagnostics))

        builders: Dict[JSONType, Callable[..., List[Validator]]] = {
            JSONType.OBJECT: self._object_validators,
            JSONType.ARRAY: self._array_validators,
            JSONType.STRING: self._string_validators,
            JSONType.NUMBER: self._number_validators,
        }
        integral = declared is not None and declared.integral
        present_types = set()
        type_validators: Dict[JSONType, Optional[Validator]] = {}
        for json_type, builder in builders.items():
            used = sorted(kw.TYPE_KEYWORDS[json_type].intersection(schema))
            if not used and not (json_type is JSONType.NUMBER and integral):
                continue
            present_types.add(json_type)
            applicable = declared is None or JSONType.ANY in declared.types or json_type in declared.types
            if not applicable:
                for name in used:
                    diagnostics.warn(
                        path + (name,),
                        name,
                        f"Keyword {name!r} has no effect because the schema does not allow type {json_type.value!r}",
                    )
            if json_type is JSONType.NUMBER:
                validators = self._number_validators(schema, path, diagnostics, integral)
            else:
                validators = builder(schema, path, diagnostics)
            if applicable:
                type_validators[json_type] = combine_all(validators)

        if len(diagnostics.errors) > error_count:
            return None

        if declared is None:
            candidates = frozenset(present_types) or CONCRETE_TYPES
            return JSONObjectValidator(
                common_validator=common_validator,
                type_validator=self._gated(type_validators, candidates),
                type=JSONType.AMBIGUOUS,
                requires_type=False,
                candidate_types=candidates,
                schema=schema,
            )
        if JSONType.ANY in declared.types:
            return JSONObjectValidator(
                common_validator=common_validator,
                type_validator=self._gated(type_validators, frozenset()),
                type=JSONType.ANY,
                requires_type=True,
                schema=schema,
            )
        if len(declared.types) == 1:
            (json_type,) = declared.types
            return JSONObjectValidator(
                common_validator=common_validator,
                type_validator=type_validators.get(json_type),
                type=json_type,
                requires_type=True,
                schema=schema,
            )
        return JSONObjectValidator(
            common_validator=common_validator,
            type_validator=self._gated(type_validators, declared.types),
            type=JSONType.AMBIGUOUS,
            requires_type=True,
            candidate_types=declared.types,
            schema=schema,
        )

    @staticmethod
    def _gated(
        type_validators: Dict[JSONType, Optional[Validator]],
        candidates: FrozenSet[JSONType],
    ) -> Optional[Validator]:
        """Combine per-type validators so each only applies to values of its type."""
        present = [
            (json_type, type_validators[json_type])
            for json_type in _TYPE_ORDER
            if type_validators.get(json_type) is not None
        ]
        if not present:
            return None
        if len(present) == 1 and candidates == frozenset({present[0][0]}):
            return present[0][1]
        return combine_all(
            [
                JSONObjectValidator(type_validator=validator, type=json_type, requires_type=False)
                for json_type, validator in present
            ]
        )

    # ------------------------------------------------------------------
    def _declared_types(
        self, schema: Mapping, path: SchemaPath, diagnostics: _Diagnostics
    ) -> Optional[_DeclaredTypes]:
        if kw.TYPE not in schema:
            return None
        declaration = schema[kw.TYPE]
        type_path = path + (kw.TYPE,)
        if isinstance(declaration, str):
            names = [declaration]
        elif isinstance(declaration, list) and declaration and all(isinstance(name, str) for name in declaration):
            names = list(declaration)
        else:
            diagnostics.error(type_path, kw.TYPE, "'type' must be a type name or a non-empty array of type names")
            return None

        unknown = [name for name in names if name not in TYPE_NAMES]
        if unknown:
            for name in unknown:
                diagnostics.error(type_path, kw.TYPE, f"Unknown type name {name!r}")
            return None

        types = frozenset(TYPE_NAMES[name] for name in names)
        integral = "integer" in names and "number" not in names and "boolean" not in names
        return _DeclaredTypes(types=types, integral=integral)

    # ------------------------------------------------------------------
    def _subschema_list(
        self,
        schema: Mapping,
        keyword: str,
        path: SchemaPath,
        diagnostics: _Diagnostics,
    ) -> Optional[List[Optional[JSONObjectValidator]]]:
        value = schema[keyword]
        if not isinstance(value, list) or not value:
            diagnostics.error(path + (keyword,), keyword, f"{keyword!r} must be a non-empty array of schemas")
            return None
        return [
            self._compile(item, path + (keyword, index), keyword, diagnostics)
            for index, item in enumerate(value)
        ]

    def _count_validator(
        self,
        schema: Mapping,
        minimum_keyword: str,
        maximum_keyword: str,
        path: SchemaPath,
        diagnostics: _Diagnostics,
    ) -> Optional[Validator]:
        validators: List[Validator] = []
        for name in (minimum_keyword, maximum_keyword):
            if name not in schema:
                continue
            bound = schema[name]
            if not _is_non_negative_integer(bound):
                diagnostics.error(path + (name,), name, f"{name!r} must be a non-negative integer")
                continue
            if name == minimum_keyword:
                validators.append(NumberValidator(minimum=int(bound)))
            else:
                validators.append(NumberValidator(maximum=int(bound)))
        return combine_all(validators)

    # ------------------------------------------------------------------
    def _common_validators(self, schema: Mapping, path: SchemaPath, diagnostics: _Diagnostics) -> List[Validator]:
        validators: List[Validator] = []

        if kw.ENUM in schema:
            values = schema[kw.ENUM]
            if isinstance(values, list) and values:
                validators.append(EnumValidator(tuple(values)))
            else:
                diagnostics.error(path + (kw.ENUM,), kw.ENUM, "'enum' must be a non-empty array")

        if kw.CONST in schema:
            validators.append(EnumValidator((schema[kw.CONST],)))

        combinators = (
            (kw.ALL_OF, CompoundValidator.and_validator),
            (kw.ANY_OF, CompoundValidator.or_validator),
            (kw.ONE_OF, CompoundValidator.mutual_exclusion_validator),
        )
        for name, factory in combinators:
            if name not in schema:
                continue
            subvalidators = self._subschema_list(schema, name, path, diagnostics)
            if subvalidators is not None and all(item is not None for item in subvalidators):
                validators.append(factory(subvalidators))

        if kw.NOT in schema:
            negated = self._compile(schema[kw.NOT], path + (kw.NOT,), kw.NOT, diagnostics)
            if negated is not None:
                validators.append(CompoundValidator.not_validator(negated))

        return validators

    def _number_validators(
        self,
        schema: Mapping,
        path: SchemaPath,
        diagnostics: _Diagnostics,
        integral: bool = False,
    ) -> List[Validator]:
        validators: List[Validator] = []
        bounds = (
            (kw.MINIMUM, kw.EXCLUSIVE_MINIMUM, "minimum", "exclusive_minimum"),
            (kw.MAXIMUM, kw.EXCLUSIVE_MAXIMUM, "maximum", "exclusive_maximum"),
        )
        for bound_keyword, exclusive_keyword, bound_arg, exclusive_arg in bounds:
            bound = schema.get(bound_keyword)
            if bound_keyword in schema and not _is_json_number(bound):
                diagnostics.error(path + (bound_keyword,), bound_keyword, f"{bound_keyword!r} must be a number")
                bound = None
            exclusive = schema.get(exclusive_keyword, False)
            if isinstance(exclusive, bool):
                if exclusive and bound_keyword not in schema:
                    diagnostics.error(
                        path + (exclusive_keyword,),
                        exclusive_keyword,
                        f"{exclusive_keyword!r} requires {bound_keyword!r}",
                    )
                if bound is not None:
                    validators.append(NumberValidator(**{bound_arg: bound, exclusive_arg: exclusive}))
            elif _is_json_number(exclusive):
                if bound is not None:
                    validators.append(NumberValidator(**{bound_arg: bound}))
                validators.append(NumberValidator(**{bound_arg: exclusive, exclusive_arg: True}))
            else:
                diagnostics.error(
                    path + (exclusive_keyword,),
                    exclusive_keyword,
                    f"{exclusive_keyword!r} must be a boolean or a number",
                )

        multiple_of = None
        if kw.MULTIPLE_OF in schema:
            candidate = schema[kw.MULTIPLE_OF]
            if _is_json_number(candidate) and candidate > 0:
                multiple_of = candidate
            else:
                diagnostics.error(path + (kw.MULTIPLE_OF,), kw.MULTIPLE_OF, "'multipleOf' must be a number greater than 0")
        if integral or multiple_of is not None:
            validators.append(NumberValidator(requires_integral=integral, multiple_of=multiple_of))
        return validators

    def _string_validators(self, schema: Mapping, path: SchemaPath, diagnostics: _Diagnostics) -> List[Validator]:
        lengths: Dict[str, Optional[int]] = {}
        for name in (kw.MIN_LENGTH, kw.MAX_LENGTH):
            if name not in schema:
                continue
            if _is_non_negative_integer(schema[name]):
                lengths[name] = int(schema[name])
            else:
                diagnostics.error(path + (name,), name, f"{name!r} must be a non-negative integer")

        pattern = None
        if kw.PATTERN in schema:
            candidate = schema[kw.PATTERN]
            if not isinstance(candidate, str):
                diagnostics.error(path + (kw.PATTERN,), kw.PATTERN, "'pattern' must be a string")
            else:
                try:
                    re.compile(candidate)
                except re.error as exc:
                    diagnostics.error(path + (kw.PATTERN,), kw.PATTERN, f"'pattern' is not a valid regular expression: {exc}")
                else:
                    pattern = candidate

        if not lengths and pattern is None:
            return []
        return [
            StringValidator(
                minimum_length=lengths.get(kw.MIN_LENGTH),
                maximum_length=lengths.get(kw.MAX_LENGTH),
                pattern=pattern,
            )
        ]

    def _array_validators(self, schema: Mapping, path: SchemaPath, diagnostics: _Diagnostics) -> List[Validator]:
        validators: List[Validator] = []
        count_validator = self._count_validator(schema, kw.MIN_ITEMS, kw.MAX_ITEMS, path, diagnostics)
        # additionalItems only constrains tuple-style items, but its shape is checked regardless.
        additional = self._additional_items(schema, path, diagnostics)

        element_validators: List[Validator] = []
        positional_validator: Optional[Validator] = None
        if kw.ITEMS in schema:
            items = schema[kw.ITEMS]
            if isinstance(items, Mapping):
                item_validator = self._compile(items, path + (kw.ITEMS,), kw.ITEMS, diagnostics)
                if item_validator is not None:
                    element_validators.append(item_validator)
            elif isinstance(items, list):
                positional = [
                    self._compile(item, path + (kw.ITEMS, index), kw.ITEMS, diagnostics)
                    for index, item in enumerate(items)
                ]
                if additional is not None and all(item is not None for item in positional):
                    allows_additional, additional_validator = additional
                    positional_validator = PositionalItemsValidator(
                        item_validators=tuple(positional),
                        additional_items_validator=additional_validator,
                        allows_additional_items=allows_additional,
                    )
            else:
                diagnostics.error(path + (kw.ITEMS,), kw.ITEMS, "'items' must be a schema or an array of schemas")

        if count_validator is not None or element_validators:
            validators.append(
                CollectionValidator(count_validator=count_validator, element_validators=tuple(element_validators))
            )
        if positional_validator is not None:
            validators.append(positional_validator)

        if kw.UNIQUE_ITEMS in schema:
            unique = schema[kw.UNIQUE_ITEMS]
            if not isinstance(unique, bool):
                diagnostics.error(path + (kw.UNIQUE_ITEMS,), kw.UNIQUE_ITEMS, "'uniqueItems' must be a boolean")
            elif unique:
                validators.append(UniqueItemsValidator())
        return validators

    def _additional_items(
        self, schema: Mapping, path: SchemaPath, diagnostics: _Diagnostics
    ) -> Optional[Tuple[bool, Optional[Validator]]]:
        if kw.ADDITIONAL_ITEMS not in schema:
            return True, None
        additional = schema[kw.ADDITIONAL_ITEMS]
        if isinstance(additional, bool):
            return additional, None
        if isinstance(additional, Mapping):
            validator = self._compile(additional, path + (kw.ADDITIONAL_ITEMS,), kw.ADDITIONAL_ITEMS, diagnostics)
            return (True, validator) if validator is not None else None
        diagnostics.error(
            path + (kw.ADDITIONAL_ITEMS,), kw.ADDITIONAL_ITEMS, "'additionalItems' must be a boolean or a schema"
        )
        return None

    def _object_validators(self, schema: Mapping, path: SchemaPath, diagnostics: _Diagnostics) -> List[Validator]:
        validators: List[Validator] = []
        count_validator = self._count_validator(schema, kw.MIN_PROPERTIES, kw.MAX_PROPERTIES, path, diagnostics)

        pair_validators: List[KeyValuePairValidator] = []
        known_keys: List[str] = []
        if kw.PROPERTIES in schema:
            properties = schema[kw.PROPERTIES]
            if isinstance(properties, Mapping):
                for name, subschema in properties.items():
                    known_keys.append(name)
                    validator = self._compile(subschema, path + (kw.PROPERTIES, name), kw.PROPERTIES, diagnostics)
                    if validator is not None:
                        pair_validators.append(KeyValuePairValidator(name, validator))
            else:
                diagnostics.error(path + (kw.PROPERTIES,), kw.PROPERTIES, "'properties' must be an object of schemas")

        patterns: List[str] = []
        pattern_validators: List[Tuple[str, Validator]] = []
        if kw.PATTERN_PROPERTIES in schema:
            pattern_properties = schema[kw.PATTERN_PROPERTIES]
            if isinstance(pattern_properties, Mapping):
                for pattern, subschema in pattern_properties.items():
                    pattern_path = path + (kw.PATTERN_PROPERTIES, pattern)
                    try:
                        re.compile(pattern)
                    except (re.error, TypeError) as exc:
                        diagnostics.error(
                            pattern_path, kw.PATTERN_PROPERTIES, f"{pattern!r} is not a valid regular expression: {exc}"
                        )
                        continue
                    patterns.append(pattern)
                    validator = self._compile(subschema, pattern_path, kw.PATTERN_PROPERTIES, diagnostics)
                    if validator is not None:
                        pattern_validators.append((pattern, validator))
            else:
                diagnostics.error(
                    path + (kw.PATTERN_PROPERTIES,),
                    kw.PATTERN_PROPERTIES,
                    "'patternProperties' must be an object of schemas",
                )

        key_validators: List[Validator] = []
        additional_validator: Optional[Validator] = None
        if kw.ADDITIONAL_PROPERTIES in schema:
            additional = schema[kw.ADDITIONAL_PROPERTIES]
            allowed = AllowedKeysValidator(known_keys=frozenset(known_keys), patterns=tuple(patterns))
            if additional is False:
                key_validators.append(allowed)
            elif isinstance(additional, Mapping):
                value_validator = self._compile(
                    additional, path + (kw.ADDITIONAL_PROPERTIES,), kw.ADDITIONAL_PROPERTIES, diagnostics
                )
                if value_validator is not None:
                    additional_validator = AdditionalPropertiesValidator(allowed, value_validator)
            elif additional is not True:
                diagnostics.error(
                    path + (kw.ADDITIONAL_PROPERTIES,),
                    kw.ADDITIONAL_PROPERTIES,
                    "'additionalProperties' must be a boolean or a schema",
                )

        if count_validator is not None or key_validators or pair_validators:
            validators.append(
                KeyedCollectionValidator(
                    count_validator=count_validator,
                    key_validators=tuple(key_validators),
                    key_value_pair_validators=tuple(pair_validators),
                )
            )

        if kw.REQUIRED in schema:
            required = schema[kw.REQUIRED]
            if (
                isinstance(required, list)
                and all(isinstance(name, str) for name in required)
                and len(set(required)) == len(required)
            ):
                if required:
                    validators.append(RequiredKeysValidator(tuple(required)))
            else:
                diagnostics.error(path + (kw.REQUIRED,), kw.REQUIRED, "'required' must be an array of unique strings")

        if pattern_validators:
            validators.append(PatternPropertiesValidator(tuple(pattern_validators)))
        if additional_validator is not None:
            validators.append(additional_validator)

        if kw.DEPENDENCIES in schema:
            dependency = self._dependencies(schema[kw.DEPENDENCIES], path + (kw.DEPENDENCIES,), diagnostics)
            if dependency is not None:
                validators.append(dependency)
        return validators

    def _dependencies(self, dependencies: Any, path: SchemaPath, diagnostics: _Diagnostics) -> Optional[Validator]:
        if not isinstance(dependencies, Mapping):
            diagnostics.error(path, kw.DEPENDENCIES, "'dependencies' must be an object")
            return None
        entries = []
        for key, dependency in dependencies.items():
            if isinstance(dependency, Mapping):
                validator = self._compile(dependency, path + (key,), kw.DEPENDENCIES, diagnostics)
                if validator is not None:
                    entries.append((key, validator))
            elif isinstance(dependency, list) and all(isinstance(name, str) for name in dependency):
                entries.append((key, tuple(dependency)))
            else:
                diagnostics.error(
                    path + (key,), kw.DEPENDENCIES, "a dependency must be a schema or an array of key names"
                )
        if not entries:
            return None
        return DependenciesValidator(tuple(entries))


_DEFAULT_COMPILER = SchemaCompiler()


def compile_schema(schema: Any) -> CompilationResult:
    """Compile ``schema`` with a shared :class:`SchemaCompiler`."""
    return _DEFAULT_COMPILER.compile(schema)


__all__ = [
    "CompilationIssue",
    "CompilationResult",
    "SchemaCompilationError",
    "SchemaCompiler",
    "compile_schema",
]
