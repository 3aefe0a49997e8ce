"""Type-gated validator for a JSON value."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping, Optional

import structlog

from jsonvalidation.validators.base import ErrorCode, ValidationError, Validator

from .types import CONCRETE_TYPES, JSONType, TypeValidator

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class JSONObjectValidator(Validator):
    """Apply type-specific rules only to values of the matching type.

    ``common_validator`` runs for every value. ``type_validator`` runs only
    when the value's classification matches ``type`` (any of
    ``candidate_types`` when ``type`` is AMBIGUOUS). A mismatch is itself a
    failure only when ``requires_type`` is set; otherwise it just skips the
    type-specific rules.
    """

    common_validator: Optional[Validator] = None
    type_validator: Optional[Validator] = None
    type: JSONType = JSONType.ANY
    requires_type: bool = False
    candidate_types: FrozenSet[JSONType] = CONCRETE_TYPES
    schema: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)
    type_check: TypeValidator = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidate_types", frozenset(self.candidate_types))
        object.__setattr__(
            self,
            "type_check",
            TypeValidator(frozenset({self.type}), ambiguous_candidates=self.candidate_types),
        )

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> "JSONObjectValidator":
        """Compile ``schema``, raising :class:`SchemaCompilationError` on failure.

        Compilation warnings are logged. Callers that need them as data use
        :func:`compile_schema`, which returns them in its result.
        """
        from .compiler import SchemaCompilationError, compile_schema

        result = compile_schema(schema)
        for warning in result.warnings:
            logger.warning("schema.warning", keyword=warning.keyword, pointer=warning.pointer, message=warning.message)
        if result.validator is None:
            raise SchemaCompilationError(result.errors, result.warnings)
        return result.validator

    def matches_type(self, value: Any) -> bool:
        return self.type_check.accepts(value)

    def validate(self, value: Any) -> None:
        if not self.matches_type(value):
            if self.requires_type:
                self.type_check.validate(value)
            if self.common_validator is not None:
                self.common_validator.validate(value)
            return

        errors: List[ValidationError] = []
        for validator in (self.common_validator, self.type_validator):
            if validator is None:
                continue
            try:
                validator.validate(value)
            except ValidationError as exc:
                errors.append(exc)
        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ValidationError(
                "Value failed both its common and its type-specific constraints",
                code=ErrorCode.JSON_VALUE_VALIDATION_ERROR,
                value=value,
                underlying_errors=errors,
            )


__all__ = ["JSONObjectValidator"]
