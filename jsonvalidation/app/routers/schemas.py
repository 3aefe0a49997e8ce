"""Schema registry and compilation endpoints."""
from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, HTTPException

from jsonvalidation.models.api import CompileRequest, CompileResponse, SchemaSummary
from jsonvalidation.observability import record_compilation
from jsonvalidation.reporting import schema_issues
from jsonvalidation.schema import compile_schema
from jsonvalidation.services import SCHEMA_REGISTRY

router = APIRouter(tags=["schemas"])


@router.get("/schemas", response_model=List[SchemaSummary])
def list_schemas() -> List[SchemaSummary]:
    """Return lightweight summaries of the registered schemas."""
    return SCHEMA_REGISTRY.summaries()


@router.get("/schemas/{name}")
def get_schema(name: str) -> Dict[str, object]:
    try:
        entry = SCHEMA_REGISTRY.resolve(name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
    return {
        "id": entry.id,
        "title": entry.title,
        "schema": entry.schema,
        "warnings": [issue.model_dump() for issue in schema_issues(entry.warnings)],
    }


@router.post("/schemas/compile", response_model=CompileResponse)
def compile_schema_route(payload: CompileRequest) -> CompileResponse:
    """Compile a schema and report every error and warning it produces."""
    result = compile_schema(payload.schema_)
    record_compilation(result)
    return CompileResponse(
        valid=result.succeeded,
        errors=schema_issues(result.errors),
        warnings=schema_issues(result.warnings),
    )
