"""
Module: scoring.calculator

Purpose:
    Deterministic scoring of a submission against an Exam on the 10-point
    scale:

    - Multiple choice: 0.25 per correct answer (case-insensitive)
    - True/false: 0.1 / 0.25 / 0.5 / 1.0 for 1 / 2 / 3 / 4 matching statements
    - Short answer (and legacy writing): 0.5 per answer matching after
      lower-casing, whitespace removal and comma -> period

Key Functions:
    - calculate_score(): Answer map + Exam -> ScoreBreakdown
    - calculate_true_false_points(): Matching statement count -> points
    - normalize_answer(): Short-answer comparison form
    - parse_true_false_submission(): Submitted payload -> set of "true" letters

Dependencies:
    - core.models: Exam, ScoreBreakdown
    - core.utils.serialization.normalize_answer_map: Key coercion

Used By:
    - cli: ``math-exam score``
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Dict, Mapping, Set

from math_exam_toolkit.core.models.exams import Exam
from math_exam_toolkit.core.models.questions import QuestionType
from math_exam_toolkit.core.models.scores import (
    ScoreBreakdown,
    SectionScore,
    TrueFalseDetail,
    TrueFalseScore,
)
from math_exam_toolkit.core.utils.serialization import normalize_answer_map

logger = logging.getLogger(__name__)

MULTIPLE_CHOICE_POINTS = 0.25
SHORT_ANSWER_POINTS = 0.5
TRUE_FALSE_MAX_POINTS = 1.0

TRUE_FALSE_LETTERS = ("a", "b", "c", "d")
TRUE_FALSE_LADDER = {4: 1.0, 3: 0.5, 2: 0.25, 1: 0.1}

_WHITESPACE = re.compile(r"\s+")


def calculate_true_false_points(correct_count: int) -> float:
    """
    Points for a true/false question by number of matching statements.

    Example:
        >>> calculate_true_false_points(3)
        0.5
    """
    return TRUE_FALSE_LADDER.get(correct_count, 0.0)


def normalize_answer(answer: str) -> str:
    """Lower-case, drop all whitespace, use "." as decimal separator."""
    return _WHITESPACE.sub("", answer.lower()).replace(",", ".")


def _split_letters(raw: str) -> Set[str]:
    return {part.strip() for part in raw.lower().split(",") if part.strip()}


def parse_true_false_submission(raw: str) -> Set[str]:
    """
    Letters the student marked as true.

    A JSON object such as ``{"a": true, "b": false}`` is read first (keys
    whose value is exactly ``true``); anything else is treated as a comma
    list like ``"a,c"``.
    """
    try:
        parsed = json.loads(raw)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        return {str(key).lower() for key, value in parsed.items() if value is True}
    return _split_letters(raw)


def _score_true_false(submitted: str, correct: str) -> int:
    """Count statements (a-d) where the student agrees with the key."""
    should_be_true = _split_letters(correct)
    said_true = parse_true_false_submission(submitted)
    return sum(
        1 for letter in TRUE_FALSE_LETTERS
        if (letter in should_be_true) == (letter in said_true)
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(answers: Mapping[Any, Any], exam: Exam) -> ScoreBreakdown:
    """
    Score one submission.

    Pure function: no side effects, same input gives a bit-identical
    result regardless of answer-map order.

    Args:
        answers: Question number (int or numeric string) -> submitted answer
        exam: Exam the answers belong to

    Returns:
        ScoreBreakdown with per-section counts, points, total and percentage

    Raises:
        ValidationError: If an answer key is not a question number

    Example:
        >>> breakdown = calculate_score({101: "A", 301: "1,5"}, exam)
        >>> breakdown.total_score, breakdown.percentage
        (0.75, 100)
    """
    submitted = normalize_answer_map(answers)

    mc_total = mc_correct = 0
    mc_points = 0.0
    tf_total = tf_correct = tf_partial = 0
    tf_points = 0.0
    tf_details: Dict[int, TrueFalseDetail] = {}
    sa_total = sa_correct = 0
    sa_points = 0.0

    for question in exam.questions:
        user_answer = submitted.get(question.number)
        correct_answer = question.correct_answer

        if question.question_type is QuestionType.MULTIPLE_CHOICE:
            mc_total += 1
            if user_answer and correct_answer and user_answer.upper() == correct_answer.upper():
                mc_correct += 1
                mc_points += MULTIPLE_CHOICE_POINTS

        elif question.question_type is QuestionType.TRUE_FALSE:
            tf_total += 1
            if user_answer and correct_answer and question.options:
                correct_count = _score_true_false(user_answer, correct_answer)
                points = calculate_true_false_points(correct_count)
                tf_points += points
                tf_details[question.number] = TrueFalseDetail(correct_count, points)
                if correct_count == len(TRUE_FALSE_LETTERS):
                    tf_correct += 1
                elif correct_count > 0:
                    tf_partial += 1

        elif question.question_type in (QuestionType.SHORT_ANSWER, QuestionType.WRITING):
            sa_total += 1
            if user_answer and correct_answer and (
                normalize_answer(user_answer) == normalize_answer(correct_answer)
            ):
                sa_correct += 1
                sa_points += SHORT_ANSWER_POINTS

    total_score = round(mc_points + tf_points + sa_points, 2)
    max_score = round(
        mc_total * MULTIPLE_CHOICE_POINTS
        + tf_total * TRUE_FALSE_MAX_POINTS
        + sa_total * SHORT_ANSWER_POINTS,
        2,
    )
    percentage = _round_half_up(total_score / max_score * 100) if max_score > 0 else 0

    logger.debug(
        f"Scored {exam.title!r}: {total_score}/{max_score} ({percentage}%) "
        f"MC {mc_correct}/{mc_total}, TF {tf_correct}+{tf_partial}p/{tf_total}, "
        f"SA {sa_correct}/{sa_total}"
    )

    return ScoreBreakdown(
        multiple_choice=SectionScore(mc_total, mc_correct, round(mc_points, 2)),
        true_false=TrueFalseScore(
            total=tf_total,
            correct=tf_correct,
            partial=tf_partial,
            points=round(tf_points, 2),
            details=tf_details,
        ),
        short_answer=SectionScore(sa_total, sa_correct, round(sa_points, 2)),
        total_score=total_score,
        max_score=max_score,
        percentage=percentage,
    )
