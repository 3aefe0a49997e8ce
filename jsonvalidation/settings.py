"""Runtime settings for the validation service."""
from __future__ import annotations

import os
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]


def _comma_separated_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


ENV = os.getenv("ENV", os.getenv("ENVIRONMENT", "development")).strip().lower()
ENVIRONMENT = os.getenv("ENVIRONMENT", ENV).strip().lower()
ALLOWED_CORS_ORIGINS = _comma_separated_list(os.getenv("ALLOWED_ORIGINS"))

SCHEMA_DIR = Path(os.getenv("SCHEMA_DIR", str(ROOT / "config" / "schemas"))).expanduser().resolve()
STRICT_SCHEMAS = _flag(os.getenv("STRICT_SCHEMAS"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

MAX_PAYLOAD_MB = int(os.getenv("MAX_PAYLOAD_MB", "2"))
MAX_PAYLOAD_BYTES = MAX_PAYLOAD_MB * 1024 * 1024

RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "120"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

settings = SimpleNamespace(
    ENV=ENV,
    ENVIRONMENT=ENVIRONMENT,
    ALLOWED_ORIGINS=ALLOWED_CORS_ORIGINS,
    ALLOWED_CORS_ORIGINS=ALLOWED_CORS_ORIGINS,
    SCHEMA_DIR=SCHEMA_DIR,
    STRICT_SCHEMAS=STRICT_SCHEMAS,
    LOG_LEVEL=LOG_LEVEL,
    MAX_PAYLOAD_MB=MAX_PAYLOAD_MB,
    MAX_PAYLOAD_BYTES=MAX_PAYLOAD_BYTES,
    RATE_LIMIT_REQUESTS=RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS=RATE_LIMIT_WINDOW_SECONDS,
)

__all__ = [
    "ENV",
    "ENVIRONMENT",
    "ALLOWED_CORS_ORIGINS",
    "SCHEMA_DIR",
    "STRICT_SCHEMAS",
    "LOG_LEVEL",
    "MAX_PAYLOAD_MB",
    "MAX_PAYLOAD_BYTES",
    "RATE_LIMIT_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
    "settings",
]
