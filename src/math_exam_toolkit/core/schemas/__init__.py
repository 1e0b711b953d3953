"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_exam,
    ValidationError,
    EXAM_SCHEMA_VERSION,
)

__all__ = [
    "validate_exam",
    "ValidationError",
    "EXAM_SCHEMA_VERSION",
]
