"""Shared schema validation utilities.

Structured YAML input (settings, profile manifests) is validated with JSON
Schema. Schemas are stored as YAML files under ``promptsmith.data/schemas``
and loaded in a single, consistent way.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator

from promptsmith.core.utils.io import read_yaml
from promptsmith.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""


@lru_cache(maxsize=16)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.schema.yaml`` when no extension is present.

    Args:
        schema_name: Schema name (e.g. ``"manifest"`` or ``"config.schema.yaml"``).

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}\nSearched:\n- {schema_path.parent}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    schema = load_schema(schema_name)
    try:
        jsonschema.validate(instance=payload, schema=schema)
    except jsonschema.ValidationError as exc:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {exc.message}"
        ) from exc


def validate_payload_safe(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return every error message (empty if valid).

    Errors are prefixed with their dotted location in the payload so that a
    manifest author can find them, e.g. ``agents.alpha: 'title' is a required property``.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)

    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


__all__ = [
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
    "SchemaValidationError",
]
