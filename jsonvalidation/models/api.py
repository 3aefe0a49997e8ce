"""Pydantic models shared between the API layer and report rendering."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class ErrorDetail(BaseModel):
    """One leaf validation failure, located by a JSON pointer into the document."""

    pointer: str = Field(..., description="JSON pointer to the failing value; empty for the root")
    code: str
    message: str


class SchemaIssue(BaseModel):
    """Compilation error or warning, located by a JSON pointer into the schema."""

    keyword: Optional[str] = None
    pointer: str
    message: str


class CompileRequest(BaseModel):
    schema_: Dict[str, Any] = Field(..., alias="schema", description="Schema to compile")

    model_config = {"populate_by_name": True}


class CompileResponse(BaseModel):
    valid: bool
    errors: List[SchemaIssue] = Field(default_factory=list)
    warnings: List[SchemaIssue] = Field(default_factory=list)


class ValidateRequest(BaseModel):
    """Validate ``instance`` against an inline schema or a registered one."""

    instance: Any = Field(..., description="Decoded JSON document to validate")
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema", description="Inline schema")
    schema_id: Optional[str] = Field(default=None, description="Registered schema id or title")
    include_report: bool = Field(default=False, description="Render a markdown report in the response")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _exactly_one_schema(self) -> "ValidateRequest":
        if (self.schema_ is None) == (self.schema_id is None):
            raise ValueError("Provide exactly one of 'schema' or 'schema_id'")
        return self


class ValidateResponse(BaseModel):
    valid: bool
    errors: List[ErrorDetail] = Field(default_factory=list)
    warnings: List[SchemaIssue] = Field(default_factory=list)
    report: Optional[str] = None


class SchemaSummary(BaseModel):
    id: str
    title: Optional[str] = None
    warnings: int = 0


__all__ = [
    "CompileRequest",
    "CompileResponse",
    "ErrorDetail",
    "SchemaIssue",
    "SchemaSummary",
    "ValidateRequest",
    "ValidateResponse",
]
