"""
Core Models Package

Immutable data models shared by the import pipeline and the scorer.

All public models are frozen dataclasses with ``to_dict``/``from_dict``.
Transient parse-time records (paragraphs, in-progress questions) live in
the extractor package instead and never leave it.

| Model | Produced by | Consumed by |
|-------|-------------|-------------|
| `ImageRecord` | extractor.images | questions, exams |
| `Question` | extractor.normalizer | Exam, scoring |
| `Exam` | extractor.pipeline | scoring, serialization |
| `ScoreBreakdown` | scoring.calculator | callers |
"""

from .images import ImageRecord
from .questions import (
    Question,
    QuestionOption,
    QuestionType,
    SectionInfo,
    make_question_number,
)
from .exams import Exam, ExamSection, DEFAULT_TIME_LIMIT
from .scores import ScoreBreakdown, SectionScore, TrueFalseDetail, TrueFalseScore

__all__ = [
    "ImageRecord",
    "Question",
    "QuestionOption",
    "QuestionType",
    "SectionInfo",
    "make_question_number",
    "Exam",
    "ExamSection",
    "DEFAULT_TIME_LIMIT",
    "ScoreBreakdown",
    "SectionScore",
    "TrueFalseDetail",
    "TrueFalseScore",
]
