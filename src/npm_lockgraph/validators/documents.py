"""JSON Schema validation for lockfiles and settings documents."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any
from collections.abc import Iterable

from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).resolve().parents[1] / "schemas"
LOCKFILE_SCHEMA = "package-lock.schema.json"
CONFIG_SCHEMA = "config.schema.json"


class SchemaValidationError(ValueError):
    """Raised when a document does not match its JSON schema."""


@lru_cache(maxsize=None)
def _validator(schema_name: str) -> Draft202012Validator:
    schema = json.loads((SCHEMA_DIR / schema_name).read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_document(document: Any, schema_name: str) -> None:
    """Raise ``SchemaValidationError`` listing every violation in ``document``."""
    validator = _validator(schema_name)
    errors = sorted(validator.iter_errors(document), key=lambda e: list(map(str, e.path)))
    if errors:
        raise SchemaValidationError("\n" + _format_errors(errors))


def validate_lockfile(document: Any) -> None:
    validate_document(document, LOCKFILE_SCHEMA)


def validate_settings(document: Any) -> None:
    validate_document(document, CONFIG_SCHEMA)
