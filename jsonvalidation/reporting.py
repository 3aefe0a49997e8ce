"""Turn validation and compilation diagnostics into report payloads."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from jsonvalidation.models.api import ErrorDetail, SchemaIssue
from jsonvalidation.schema import CompilationIssue
from jsonvalidation.validators import ValidationError


def _pointer(path: Sequence[object]) -> str:
    return "".join("/" + str(segment).replace("~", "~0").replace("/", "~1") for segment in path)


def error_details(error: Optional[ValidationError]) -> List[ErrorDetail]:
    """Flatten an error tree into one detail per leaf failure."""
    if error is None:
        return []
    return [
        ErrorDetail(pointer=_pointer(path), code=leaf.code.value, message=leaf.description)
        for path, leaf in error.iter_leaves()
    ]


def schema_issues(issues: Iterable[CompilationIssue]) -> List[SchemaIssue]:
    return [SchemaIssue(keyword=issue.keyword, pointer=issue.pointer, message=issue.message) for issue in issues]


def render_markdown(
    title: str,
    errors: Sequence[ErrorDetail],
    warnings: Sequence[SchemaIssue] = (),
) -> str:
    lines = [f"# {title}", ""]
    if not errors:
        lines.append("Document is valid.")
    else:
        for detail in errors:
            lines.append(f"- **{detail.pointer or '/'}** ({detail.code}): {detail.message}")

    if warnings:
        lines.extend(["", "## Schema warnings", ""])
        for issue in warnings:
            lines.append(f"- **{issue.pointer or '/'}**: {issue.message}")

    return "\n".join(lines)


__all__ = ["error_details", "render_markdown", "schema_issues"]
