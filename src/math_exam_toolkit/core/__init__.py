"""
Math Exam Toolkit Core Package

Shared data models and persistence utilities.

1. **Immutable Data Models**
   - Frozen dataclasses, new instances created for any change
   - Exams are read-only once the import pipeline returns them

2. **Encoded Question Numbers**
   - ``number = section * 100 + in_section_number``
   - The section is always recoverable as ``number // 100``

3. **Single Answer Key**
   - ``Exam.answers`` holds multiple choice and short answer keys only
   - True/false keys are authored separately and stored on the question
"""

from .models import (
    Exam,
    ExamSection,
    ImageRecord,
    Question,
    QuestionOption,
    QuestionType,
    ScoreBreakdown,
    SectionInfo,
)

__all__ = [
    "Exam",
    "ExamSection",
    "ImageRecord",
    "Question",
    "QuestionOption",
    "QuestionType",
    "ScoreBreakdown",
    "SectionInfo",
]
