"""Schema loading and validation for metrics records and settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

SCHEMA_DIR = Path(__file__).resolve().parent / "schema"
RECORD_SCHEMA = "pipeline-metrics.schema.json"
SETTINGS_SCHEMA = "settings.schema.json"


def get_schema(name: str) -> dict[str, Any]:
    """Load a bundled JSON schema.

    Args:
        name: File name under the package ``schema`` directory.

    Returns:
        Parsed JSON schema as a dict.
    """
    schema_path = SCHEMA_DIR / name
    data = json.loads(schema_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Schema at {schema_path} is not a JSON object")
    return data


def validate_against(data: dict[str, Any], name: str) -> list[str]:
    """Validate ``data`` against the named schema.

    Returns:
        Sorted list of validation error strings.
    """
    validator = Draft7Validator(get_schema(name))
    errors: list[str] = []
    for err in validator.iter_errors(data):
        path = ".".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{path}: {err.message}")
    return sorted(errors)


def validate_record(payload: dict[str, Any]) -> list[str]:
    return validate_against(payload, RECORD_SCHEMA)
