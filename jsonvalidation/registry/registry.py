"""Load schema files from disk, compile them once and expose lookup helpers."""
from __future__ import annotations

import json
from dataclasses import dataclass
from difflib import get_close_matches
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import structlog

from jsonvalidation.models.api import SchemaSummary
from jsonvalidation.observability import log_schema_issues
from jsonvalidation.schema import (
    CompilationIssue,
    JSONObjectValidator,
    SchemaCompilationError,
    compile_schema,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RegisteredSchema:
    id: str
    title: str | None
    schema: Mapping[str, Any]
    validator: JSONObjectValidator
    warnings: Tuple[CompilationIssue, ...] = ()

    def summary(self) -> SchemaSummary:
        return SchemaSummary(id=self.id, title=self.title, warnings=len(self.warnings))


class SchemaRegistry:
    """Schemas stored as ``<id>.json`` files in one directory.

    Files whose name starts with ``_`` are skipped. Schemas that fail to
    compile are left out of the registry and kept in :attr:`failures`; with
    ``strict`` set, schemas that compile with warnings are treated the same way.
    """

    def __init__(self, directory: Path, *, strict: bool = False) -> None:
        self.directory = Path(directory)
        self.strict = strict
        self.failures: Dict[str, SchemaCompilationError] = {}
        self._by_id: Dict[str, RegisteredSchema] = {}
        self._by_id_lower: Dict[str, RegisteredSchema] = {}
        self._by_title_lower: Dict[str, RegisteredSchema] = {}
        self._fuzzy_keys: List[str] = []
        self._fuzzy_map: Dict[str, RegisteredSchema] = {}
        self.reload()

    def __len__(self) -> int:
        return len(self._by_id)

    # ------------------------------------------------------------------
    def _load_schemas(self) -> Dict[str, RegisteredSchema]:
        loaded: Dict[str, RegisteredSchema] = {}
        self.failures = {}
        if not self.directory.is_dir():
            logger.warning("registry.missing_directory", directory=str(self.directory))
            return loaded
        for path in sorted(self.directory.glob("*.json")):
            if path.name.startswith("_"):
                continue
            identifier = path.stem
            try:
                schema = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                issue = CompilationIssue(None, (), f"Unreadable schema: {exc}")
                self.failures[identifier] = SchemaCompilationError([issue])
                logger.warning("registry.unreadable", schema_id=identifier, error=str(exc))
                continue

            result = compile_schema(schema)
            log_schema_issues(result.errors, level="error", schema_id=identifier)
            log_schema_issues(result.warnings, schema_id=identifier)
            if result.validator is None or (self.strict and result.warnings):
                issues = result.errors or result.warnings
                self.failures[identifier] = SchemaCompilationError(issues, result.warnings)
                logger.warning("registry.rejected", schema_id=identifier, errors=len(result.errors), warnings=len(result.warnings))
                continue

            title = schema.get("title") if isinstance(schema.get("title"), str) else None
            loaded[identifier] = RegisteredSchema(
                id=identifier,
                title=title,
                schema=schema,
                validator=result.validator,
                warnings=result.warnings,
            )
        logger.info("registry.loaded", directory=str(self.directory), schemas=len(loaded), failures=len(self.failures))
        return loaded

    def _build_indexes(self, schemas: Dict[str, RegisteredSchema]) -> None:
        self._by_id = dict(schemas)
        self._by_id_lower = {key.lower(): value for key, value in schemas.items()}
        self._by_title_lower = {}
        self._fuzzy_keys = []
        self._fuzzy_map = {}
        for entry in schemas.values():
            identifier = entry.id.lower()
            self._fuzzy_keys.append(identifier)
            self._fuzzy_map[identifier] = entry
            if entry.title:
                title = entry.title.strip().lower()
                self._by_title_lower[title] = entry
                self._fuzzy_keys.append(title)
                self._fuzzy_map[title] = entry

    def reload(self) -> None:
        """Reload schemas from disk."""
        self._build_indexes(self._load_schemas())

    # ------------------------------------------------------------------
    def all_schemas(self) -> Iterable[RegisteredSchema]:
        return self._by_id.values()

    def summaries(self) -> List[SchemaSummary]:
        summaries = [entry.summary() for entry in self._by_id.values()]
        summaries.sort(key=lambda item: ((item.title or item.id).lower(), item.id))
        return summaries

    def resolve(self, name_or_id: str) -> RegisteredSchema:
        if not name_or_id:
            raise KeyError("Schema identifier cannot be empty")
        token = name_or_id.strip().lower()
        direct = self._by_id_lower.get(token)
        if direct:
            return direct
        titled = self._by_title_lower.get(token)
        if titled:
            return titled
        matches = get_close_matches(token, self._fuzzy_keys, n=1, cutoff=0.6)
        if matches:
            resolved = self._fuzzy_map.get(matches[0])
            if resolved:
                return resolved
        raise KeyError(f"Schema '{name_or_id}' was not found in the registry")


__all__ = ["RegisteredSchema", "SchemaRegistry"]
