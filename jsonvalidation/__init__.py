"""Keyed-collection validation and JSON schema compilation."""
from __future__ import annotations

from .schema import (
    CompilationIssue,
    CompilationResult,
    JSONObjectValidator,
    JSONType,
    SchemaCompilationError,
    SchemaCompiler,
    TypeValidator,
    classify,
    compile_schema,
)
from .validators import (
    KeyedCollectionValidator,
    KeyValuePairValidator,
    ValidationError,
    Validator,
)

__version__ = "0.1.0"

__all__ = [
    "CompilationIssue",
    "CompilationResult",
    "JSONObjectValidator",
    "JSONType",
    "KeyValuePairValidator",
    "KeyedCollectionValidator",
    "SchemaCompilationError",
    "SchemaCompiler",
    "TypeValidator",
    "ValidationError",
    "Validator",
    "__version__",
    "classify",
    "compile_schema",
]
