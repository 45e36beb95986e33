"""JSON Schema checks for rulestack's on-disk documents.

The project config, the global config, repo manifests and the lock file each
have a schema bundled as YAML under ``rulestack/data/schemas/``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from rulestack.core.utils.io import read_yaml
from rulestack.data import get_data_path

SCHEMA_SUFFIX = ".schema.yaml"


class SchemaValidationError(ValueError):
    """A document did not match its schema; ``errors`` lists each problem."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def _schema_filename(name: str) -> str:
    if name.lower().endswith(".json"):
        raise ValueError(
            f"JSON schemas are not supported: {name}. "
            f"Bundled schemas are YAML (*{SCHEMA_SUFFIX})."
        )
    return name if name.lower().endswith(SCHEMA_SUFFIX) else name + SCHEMA_SUFFIX


@lru_cache(maxsize=16)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Return the bundled schema ``schema_name`` (suffix optional)."""
    filename = _schema_filename(schema_name)
    path = get_data_path("schemas", filename)
    if not path.is_file():
        raise FileNotFoundError(f"Schema not found: {filename}")

    document = read_yaml(path, raise_on_error=True)
    if not isinstance(document, dict):
        raise ValueError(f"Schema {filename} is not a mapping")
    return document


def _describe(error: Any) -> str:
    if not error.path:
        return error.message
    location = ".".join(str(part) for part in error.path)
    return f"{location}: {error.message}"


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Return one ``"<dotted.path>: <message>"`` line per violation.

    Root-level violations have no path prefix. An empty list means valid.
    """
    checker = Draft202012Validator(load_schema(schema_name))
    violations = sorted(checker.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    return [_describe(error) for error in violations]


def validate_payload(payload: Any, schema_name: str) -> None:
    """Like ``validate_payload_safe`` but raises ``SchemaValidationError``."""
    problems = validate_payload_safe(payload, schema_name)
    if problems:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': " + "; ".join(problems),
            problems,
        )


__all__ = [
    "SchemaValidationError",
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
]
