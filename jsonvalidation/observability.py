"""Logging setup and Prometheus metrics for the validation service."""
from __future__ import annotations

import logging
import sys
import time
from typing import Iterable

import structlog
from fastapi import FastAPI, Request
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

from jsonvalidation.schema import CompilationIssue, CompilationResult

SCHEMA_COMPILATIONS = Counter(
    "jsonvalidation_schema_compilations_total",
    "Schema compilations by outcome",
    ["outcome"],
)
DOCUMENT_VALIDATIONS = Counter(
    "jsonvalidation_document_validations_total",
    "Document validations by outcome",
    ["outcome"],
)


def init_logging(level: str = "INFO") -> None:
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
    logging.basicConfig(stream=sys.stdout, level=log_level)


def log_schema_issues(issues: Iterable[CompilationIssue], *, level: str = "warning", **context: object) -> None:
    logger = structlog.get_logger("schema")
    emit = getattr(logger, level)
    for issue in issues:
        emit("schema.issue", keyword=issue.keyword, pointer=issue.pointer, message=issue.message, **context)


def record_compilation(result: CompilationResult) -> None:
    SCHEMA_COMPILATIONS.labels(outcome="compiled" if result.succeeded else "failed").inc()


def record_validation(valid: bool) -> None:
    DOCUMENT_VALIDATIONS.labels(outcome="valid" if valid else "invalid").inc()


def attach_instrumentation(app: FastAPI) -> None:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    @app.middleware("http")
    async def _latency(request: Request, call_next):
        start = time.perf_counter()
        resp = await call_next(request)
        dur_ms = (time.perf_counter() - start) * 1000
        structlog.get_logger("request").info(
            "req",
            path=request.url.path,
            method=request.method,
            status=resp.status_code,
            duration_ms=round(dur_ms, 2),
        )
        return resp


__all__ = [
    "attach_instrumentation",
    "init_logging",
    "log_schema_issues",
    "record_compilation",
    "record_validation",
]
