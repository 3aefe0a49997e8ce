"""JSON schema compilation and type-gated validation."""
from __future__ import annotations

from .arrays import PositionalItemsValidator, UniqueItemsValidator
from .compiler import (
    CompilationIssue,
    CompilationResult,
    SchemaCompilationError,
    SchemaCompiler,
    compile_schema,
)
from .object_validator import JSONObjectValidator
from .objects import (
    AdditionalPropertiesValidator,
    AllowedKeysValidator,
    DependenciesValidator,
    PatternPropertiesValidator,
)
from .types import CONCRETE_TYPES, JSONType, TypeValidator, classify

__all__ = [
    "AdditionalPropertiesValidator",
    "AllowedKeysValidator",
    "CONCRETE_TYPES",
    "CompilationIssue",
    "CompilationResult",
    "DependenciesValidator",
    "JSONObjectValidator",
    "JSONType",
    "PatternPropertiesValidator",
    "PositionalItemsValidator",
    "SchemaCompilationError",
    "SchemaCompiler",
    "TypeValidator",
    "UniqueItemsValidator",
    "classify",
    "compile_schema",
]
