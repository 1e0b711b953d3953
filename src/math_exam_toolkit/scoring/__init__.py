"""
Module: scoring

Purpose:
    Submission scoring against an imported exam and grade presentation.

Key Functions:
    - calculate_score(): Answer map + Exam -> ScoreBreakdown
    - get_grade() / format_score(): Display helpers
"""

from .calculator import (
    calculate_score,
    calculate_true_false_points,
    normalize_answer,
    parse_true_false_submission,
)
from .grades import Grade, format_score, get_grade, total_correct_count, total_wrong_count

__all__ = [
    "calculate_score",
    "calculate_true_false_points",
    "normalize_answer",
    "parse_true_false_submission",
    "Grade",
    "format_score",
    "get_grade",
    "total_correct_count",
    "total_wrong_count",
]
