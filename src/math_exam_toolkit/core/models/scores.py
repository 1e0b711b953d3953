"""
Module: scores

Purpose:
    Provides the ScoreBreakdown dataclass and its per-section parts. A
    breakdown is always computed wholesale from a full answer map by
    scoring.calculator and never patched afterwards.

Dependencies:
    - dataclasses (std)

Used By:
    - scoring.calculator
    - scoring.grades
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True, slots=True)
class SectionScore:
    """Counts and points for multiple choice or short answer questions."""

    total: int = 0
    correct: int = 0
    points: float = 0.0

    def to_dict(self) -> dict:
        return {"total": self.total, "correct": self.correct, "points": self.points}


@dataclass(frozen=True, slots=True)
class TrueFalseDetail:
    """Result for one true/false question: matching statements (0-4) and points."""

    correct_count: int
    points: float

    def to_dict(self) -> dict:
        return {"correct_count": self.correct_count, "points": self.points}


@dataclass(frozen=True)
class TrueFalseScore:
    """
    True/false section result.

    Attributes:
        total: Number of true/false questions in the exam
        correct: Questions with all four statements matched
        partial: Questions with 1-3 statements matched
        points: Sum of awarded points
        details: Global question number -> per-question detail (graded
            questions only)
    """

    total: int = 0
    correct: int = 0
    partial: int = 0
    points: float = 0.0
    details: Dict[int, TrueFalseDetail] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "correct": self.correct,
            "partial": self.partial,
            "points": self.points,
            "details": {str(k): v.to_dict() for k, v in self.details.items()},
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Complete score of one submission.

    Attributes:
        multiple_choice: PHẦN 1 result (0.25 per correct answer)
        true_false: PHẦN 2 result (0.1-1.0 per question)
        short_answer: PHẦN 3 result (0.5 per correct answer)
        total_score: Unweighted sum of all awarded points (10-point scale)
        max_score: Points available for this exam's composition
        percentage: round(total_score / max_score * 100), 0 for empty exams
    """

    multiple_choice: SectionScore = field(default_factory=SectionScore)
    true_false: TrueFalseScore = field(default_factory=TrueFalseScore)
    short_answer: SectionScore = field(default_factory=SectionScore)
    total_score: float = 0.0
    max_score: float = 0.0
    percentage: int = 0

    def to_dict(self) -> dict:
        return {
            "multiple_choice": self.multiple_choice.to_dict(),
            "true_false": self.true_false.to_dict(),
            "short_answer": self.short_answer.to_dict(),
            "total_score": self.total_score,
            "max_score": self.max_score,
            "percentage": self.percentage,
        }
