"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    serialize_exam,
    deserialize_exam,
    save_exam_json,
    load_exam_json,
    normalize_answer_map,
    load_answers_json,
)

__all__ = [
    "serialize_exam",
    "deserialize_exam",
    "save_exam_json",
    "load_exam_json",
    "normalize_answer_map",
    "load_answers_json",
]
