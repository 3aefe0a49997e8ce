"""Schema keyword vocabulary, grouped by the JSON type each keyword constrains."""
from __future__ import annotations

from typing import Dict, FrozenSet

from .types import JSONType

TYPE = "type"

ENUM = "enum"
CONST = "const"
ALL_OF = "allOf"
ANY_OF = "anyOf"
ONE_OF = "oneOf"
NOT = "not"

MULTIPLE_OF = "multipleOf"
MINIMUM = "minimum"
MAXIMUM = "maximum"
EXCLUSIVE_MINIMUM = "exclusiveMinimum"
EXCLUSIVE_MAXIMUM = "exclusiveMaximum"

MIN_LENGTH = "minLength"
MAX_LENGTH = "maxLength"
PATTERN = "pattern"

ITEMS = "items"
ADDITIONAL_ITEMS = "additionalItems"
MIN_ITEMS = "minItems"
MAX_ITEMS = "maxItems"
UNIQUE_ITEMS = "uniqueItems"

MIN_PROPERTIES = "minProperties"
MAX_PROPERTIES = "maxProperties"
REQUIRED = "required"
PROPERTIES = "properties"
PATTERN_PROPERTIES = "patternProperties"
ADDITIONAL_PROPERTIES = "additionalProperties"
DEPENDENCIES = "dependencies"

COMMON_KEYWORDS: FrozenSet[str] = frozenset({ENUM, CONST, ALL_OF, ANY_OF, ONE_OF, NOT})

TYPE_KEYWORDS: Dict[JSONType, FrozenSet[str]] = {
    JSONType.OBJECT: frozenset(
        {
            MIN_PROPERTIES,
            MAX_PROPERTIES,
            REQUIRED,
            PROPERTIES,
            PATTERN_PROPERTIES,
            ADDITIONAL_PROPERTIES,
            DEPENDENCIES,
        }
    ),
    JSONType.ARRAY: frozenset({ITEMS, ADDITIONAL_ITEMS, MIN_ITEMS, MAX_ITEMS, UNIQUE_ITEMS}),
    JSONType.STRING: frozenset({MIN_LENGTH, MAX_LENGTH, PATTERN}),
    JSONType.NUMBER: frozenset({MULTIPLE_OF, MINIMUM, MAXIMUM, EXCLUSIVE_MINIMUM, EXCLUSIVE_MAXIMUM}),
}

# Accepted without effect on validation.
ANNOTATION_KEYWORDS: FrozenSet[str] = frozenset(
    {"$schema", "id", "$id", "title", "description", "default", "definitions", "examples", "$comment"}
)

# Known vocabulary this compiler does not implement; reported as warnings.
UNSUPPORTED_KEYWORDS: FrozenSet[str] = frozenset({"$ref", "format"})

KEYWORD_TYPES: Dict[str, JSONType] = {
    keyword: json_type for json_type, keywords in TYPE_KEYWORDS.items() for keyword in keywords
}

KNOWN_KEYWORDS: FrozenSet[str] = frozenset(
    {TYPE} | COMMON_KEYWORDS | ANNOTATION_KEYWORDS | frozenset(KEYWORD_TYPES)
)

__all__ = [
    "ANNOTATION_KEYWORDS",
    "COMMON_KEYWORDS",
    "KEYWORD_TYPES",
    "KNOWN_KEYWORDS",
    "TYPE_KEYWORDS",
    "UNSUPPORTED_KEYWORDS",
]
