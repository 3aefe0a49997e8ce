"""Command line entrypoint: validate JSON documents against a schema file."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from jsonvalidation.observability import init_logging
from jsonvalidation.reporting import error_details, render_markdown, schema_issues
from jsonvalidation.schema import compile_schema
from jsonvalidation.validators import ValidationError

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_USAGE = 2

logger = structlog.get_logger(__name__)


def _load_json(path: Path) -> object:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonvalidate",
        description="Validate JSON documents against a JSON schema.",
    )
    parser.add_argument("schema", type=Path, help="Path to the schema file")
    parser.add_argument("documents", type=Path, nargs="+", help="Documents to validate")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat schema warnings (unknown or unsupported keywords) as errors",
    )
    parser.add_argument("--log-level", default="WARNING", help="structlog level (default: WARNING)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(args.log_level)

    try:
        schema = _load_json(args.schema)
    except (OSError, ValueError) as exc:
        print(f"Cannot read schema {args.schema}: {exc}", file=sys.stderr)
        return EXIT_USAGE

    result = compile_schema(schema)
    warnings = schema_issues(result.warnings)
    for issue in warnings:
        print(f"warning: {args.schema}#{issue.pointer}: {issue.message}", file=sys.stderr)
    if not result.succeeded or (args.strict and warnings):
        for issue in schema_issues(result.errors):
            print(f"error: {args.schema}#{issue.pointer}: {issue.message}", file=sys.stderr)
        print(f"Schema {args.schema} was rejected", file=sys.stderr)
        return EXIT_USAGE

    failures: List[Path] = []
    for path in args.documents:
        try:
            document = _load_json(path)
        except (OSError, ValueError) as exc:
            print(f"Cannot read document {path}: {exc}", file=sys.stderr)
            return EXIT_USAGE
        try:
            result.validator.validate(document)
        except ValidationError as exc:
            failures.append(path)
            print(render_markdown(str(path), error_details(exc)))
            print()
            continue
        print(f"{path}: valid")

    logger.info("cli.finished", documents=len(args.documents), invalid=len(failures))
    return EXIT_INVALID if failures else EXIT_VALID


__all__ = ["EXIT_INVALID", "EXIT_USAGE", "EXIT_VALID", "main"]
