"""
Module: scoring.grades

Purpose:
    Presentation helpers for a computed ScoreBreakdown: two-decimal score
    text, letter grade ladder with Vietnamese labels, and correct/wrong
    tallies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from math_exam_toolkit.core.models.scores import ScoreBreakdown


@dataclass(frozen=True)
class Grade:
    """Letter grade and its label."""
    grade: str
    label: str

    def __str__(self) -> str:
        return f"{self.grade} ({self.label})"


# (minimum score, grade, label), highest first
GRADE_LADDER: Tuple[Tuple[float, str, str], ...] = (
    (9.0, "A+", "Xuất sắc"),
    (8.0, "A", "Giỏi"),
    (7.0, "B+", "Khá"),
    (6.0, "B", "Trung bình khá"),
    (5.0, "C", "Trung bình"),
    (4.0, "D", "Yếu"),
)
FAILING_GRADE = Grade("F", "Kém")


def format_score(score: float) -> str:
    """Score rounded to two decimals for display."""
    return f"{score:.2f}"


def get_grade(score: float) -> Grade:
    """
    Map a 10-point score to a letter grade.

    Example:
        >>> get_grade(8.25)
        Grade(grade='A', label='Giỏi')
    """
    for minimum, grade, label in GRADE_LADDER:
        if score >= minimum:
            return Grade(grade, label)
    return FAILING_GRADE


def total_correct_count(breakdown: ScoreBreakdown) -> int:
    """Fully correct questions across all sections (partial true/false excluded)."""
    return (
        breakdown.multiple_choice.correct
        + breakdown.true_false.correct
        + breakdown.short_answer.correct
    )


def total_wrong_count(breakdown: ScoreBreakdown, total_questions: int) -> int:
    """Questions not fully correct, partial true/false answers included."""
    return total_questions - total_correct_count(breakdown)
