"""Registry of named, precompiled schemas."""
from __future__ import annotations

from .registry import RegisteredSchema, SchemaRegistry

__all__ = ["RegisteredSchema", "SchemaRegistry"]
