"""
Serialization Utilities

Provides to/from JSON utilities for exams and submitted answer maps.

- Clean separation: ``serialize_*`` and ``deserialize_*`` functions
- All models have ``to_dict()`` and ``from_dict()`` methods
- Validation via schemas before deserialization
- JSON object keys are strings; question numbers are turned back into ints
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping

from ..models.exams import Exam
from ..schemas.validator import EXAM_SCHEMA_VERSION, ValidationError, validate_exam


# ─────────────────────────────────────────────────────────────────────────────
# Exam Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_exam(exam: Exam) -> dict[str, Any]:
    """
    Serialize an Exam to a dictionary.

    The output can be written to JSON and will pass schema validation.

    Args:
        exam: Exam instance to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    data = exam.to_dict()
    data["schema_version"] = EXAM_SCHEMA_VERSION
    return data


def deserialize_exam(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> Exam:
    """
    Deserialize an Exam from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate before building models
        strict: Use full jsonschema validation (implies validate)

    Returns:
        Exam instance

    Raises:
        ValidationError: If validation is enabled and data is invalid
        ValueError: If data cannot be turned into models
    """
    if validate or strict:
        validate_exam(data, strict=strict)
    return Exam.from_dict(data)


def save_exam_json(exam: Exam, path: Path) -> None:
    """
    Save an exam to a JSON file.

    Args:
        exam: Exam to save
        path: Output path (parent directories are created)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_exam(exam), f, indent=2, ensure_ascii=False)


def load_exam_json(path: Path, *, validate: bool = True, strict: bool = False) -> Exam:
    """
    Load an exam from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If the file is not valid JSON or fails validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Exam file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Invalid JSON: {e}",
                path=str(path),
                errors=[str(e)]
            )

    return deserialize_exam(data, validate=validate, strict=strict)


# ─────────────────────────────────────────────────────────────────────────────
# Submitted Answers
# ─────────────────────────────────────────────────────────────────────────────

def normalize_answer_map(answers: Mapping[Any, Any]) -> Dict[int, str]:
    """
    Coerce a submitted answer map to ``{question_number: raw_string}``.

    Keys may be ints or numeric strings (JSON). Non-string values are
    re-encoded as JSON so structured true/false payloads such as
    ``{"a": true, "b": false}`` survive as the text form the scorer expects.

    Raises:
        ValidationError: If a key is not a question number
    """
    result: Dict[int, str] = {}
    for key, value in answers.items():
        try:
            number = int(key)
        except (TypeError, ValueError):
            raise ValidationError(
                f"Answer key {key!r} is not a question number",
                path=str(key)
            )
        if value is None:
            continue
        result[number] = value if isinstance(value, str) else json.dumps(value)
    return result


def load_answers_json(path: Path) -> Dict[int, str]:
    """Load a submitted answer map from a JSON object file."""
    if not path.exists():
        raise FileNotFoundError(f"Answers file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON: {e}", path=str(path), errors=[str(e)])

    if not isinstance(data, dict):
        raise ValidationError("answers file must contain a JSON object", path=str(path))
    return normalize_answer_map(data)
