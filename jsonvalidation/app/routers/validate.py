"""Document validation endpoint."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException

from jsonvalidation.models.api import ValidateRequest, ValidateResponse
from jsonvalidation.observability import record_compilation, record_validation
from jsonvalidation.reporting import error_details, render_markdown, schema_issues
from jsonvalidation.schema import CompilationIssue, JSONObjectValidator, compile_schema
from jsonvalidation.services import SCHEMA_REGISTRY
from jsonvalidation.validators import ValidationError

router = APIRouter(tags=["validate"])


def _resolve_validator(payload: ValidateRequest) -> tuple[JSONObjectValidator, List[CompilationIssue], str]:
    if payload.schema_id is not None:
        try:
            entry = SCHEMA_REGISTRY.resolve(payload.schema_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
        return entry.validator, list(entry.warnings), entry.title or entry.id

    result = compile_schema(payload.schema_)
    record_compilation(result)
    if result.validator is None:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Schema failed to compile",
                "errors": [issue.to_dict() for issue in result.errors],
                "warnings": [issue.to_dict() for issue in result.warnings],
            },
        )
    title = payload.schema_.get("title") if isinstance(payload.schema_.get("title"), str) else "Inline schema"
    return result.validator, list(result.warnings), title


@router.post("/validate", response_model=ValidateResponse)
def validate_document(payload: ValidateRequest) -> ValidateResponse:
    validator, warnings, title = _resolve_validator(payload)

    error = None
    try:
        validator.validate(payload.instance)
    except ValidationError as exc:
        error = exc
    record_validation(error is None)

    errors = error_details(error)
    issues = schema_issues(warnings)
    report = render_markdown(f"{title} validation", errors, issues) if payload.include_report else None
    return ValidateResponse(valid=error is None, errors=errors, warnings=issues, report=report)
