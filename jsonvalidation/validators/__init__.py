"""Composable validators for JSON-like values."""
from __future__ import annotations

from .base import BlockValidator, ErrorCode, ValidationError, Validator, collect_errors
from .collections import CollectionValidator
from .compound import CompoundValidator, CompoundValidatorType, combine_all
from .keyed import KeyedCollectionValidator, KeyValuePairValidator, RequiredKeysValidator
from .values import EnumValidator, NumberValidator, StringValidator, ValueValidator

__all__ = [
    "BlockValidator",
    "CollectionValidator",
    "CompoundValidator",
    "CompoundValidatorType",
    "EnumValidator",
    "ErrorCode",
    "KeyValuePairValidator",
    "KeyedCollectionValidator",
    "NumberValidator",
    "RequiredKeysValidator",
    "StringValidator",
    "ValidationError",
    "Validator",
    "ValueValidator",
    "collect_errors",
    "combine_all",
]
