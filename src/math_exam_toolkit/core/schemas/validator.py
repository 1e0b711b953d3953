"""
Schema Validation Utilities

Validates persisted exam JSON before it is turned back into models.

- Basic structural checks always run (required fields, schema version,
  question numbering and section encoding, answer-key keys)
- ``strict=True`` additionally validates against ``exam.schema.json``
  with jsonschema
- Fail fast on the first violation
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
EXAM_SCHEMA_VERSION = 2  # v2 stores question images by id reference


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_exam(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate exam data against the exam schema.

    Args:
        data: Exam dictionary to validate (as written by ``save_exam_json``)
        strict: If True, also run full jsonschema validation

    Raises:
        ValidationError: If data is invalid
    """
    required = ["schema_version", "title", "questions", "answers"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    version = data.get("schema_version")
    if version != EXAM_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported exam schema version: {version} (expected {EXAM_SCHEMA_VERSION})",
            path="schema_version"
        )

    questions = data.get("questions")
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path="questions")

    seen: set[int] = set()
    for i, question in enumerate(questions):
        _validate_question(question, f"questions[{i}]")
        number = question["number"]
        if number in seen:
            raise ValidationError(
                f"Duplicate question number: {number}",
                path=f"questions[{i}].number"
            )
        seen.add(number)

    answers = data.get("answers")
    if not isinstance(answers, dict):
        raise ValidationError("answers must be a dict", path="answers")
    for key in answers:
        if not str(key).isdigit() or int(key) not in seen:
            raise ValidationError(
                f"Answer key {key!r} does not match any question",
                path=f"answers.{key}"
            )

    if strict:
        schema = _load_schema("exam")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message]
            )


def _validate_question(data: Any, path: str) -> None:
    """Validate one question entry."""
    if not isinstance(data, dict):
        raise ValidationError("question must be a dict", path=path)

    missing = [f for f in ("number", "text", "type") if f not in data]
    if missing:
        raise ValidationError(
            f"Question missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing]
        )

    number = data["number"]
    if not isinstance(number, int) or number // 100 not in (1, 2, 3) or number % 100 == 0:
        raise ValidationError(
            f"Invalid question number: {number!r} (must be section*100 + n)",
            path=f"{path}.number"
        )

    options = data.get("options", [])
    if not isinstance(options, list):
        raise ValidationError("options must be a list", path=f"{path}.options")
