"""Singleton services shared across FastAPI routers."""
from __future__ import annotations

from jsonvalidation.registry import SchemaRegistry
from jsonvalidation.settings import SCHEMA_DIR, STRICT_SCHEMAS

SCHEMA_REGISTRY = SchemaRegistry(SCHEMA_DIR, strict=STRICT_SCHEMAS)

__all__ = ["SCHEMA_REGISTRY"]
