"""JSON Schema validation of incoming feature records."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import jsonschema
import orjson

FEATURE_SCHEMA = "feature"


@dataclass
class ValidationResult:
    """Outcome of validating a single record."""

    ok: bool
    errors: List[str]


class SchemaRegistry:
    """Lazily loads JSON Schemas by name from a directory."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._validators: Dict[str, jsonschema.Draft202012Validator] = {}

    def _load(self, name: str) -> jsonschema.Draft202012Validator:
        if name not in self._validators:
            path = self._root / f"{name}.schema.json"
            if not path.exists():
                raise FileNotFoundError(f"Schema not found for {name}: {path}")
            schema = orjson.loads(path.read_bytes())
            jsonschema.Draft202012Validator.check_schema(schema)
            self._validators[name] = jsonschema.Draft202012Validator(schema)
        return self._validators[name]

    def validate(self, name: str, payload: object) -> ValidationResult:
        validator = self._load(name)
        errors = [f"{error.json_path}: {error.message}" for error in validator.iter_errors(payload)]
        return ValidationResult(ok=not errors, errors=errors)
