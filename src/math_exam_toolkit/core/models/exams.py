"""
Module: exams

Purpose:
    Provides the ExamSection and Exam dataclasses - the sole artifact the
    import pipeline hands to the rest of the system. Exams are read-only
    after creation; the answer key is a flat map from global question
    number to correct answer.

Key Functions:
    - Exam.get_question(number): Look up a question by global number
    - Exam.questions_in_section(section): Questions of one section
    - Exam.to_dict() / Exam.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - .questions.Question
    - .images.ImageRecord

Used By:
    - extractor.pipeline
    - scoring.calculator
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Dict, List, Optional, Tuple

from .images import ImageRecord
from .questions import Question, QuestionType


DEFAULT_TIME_LIMIT = 90  # minutes


@dataclass(frozen=True)
class ExamSection:
    """
    One populated section of an exam.

    Attributes:
        name: Heading like "PHẦN 1. Trắc nghiệm nhiều lựa chọn"
        description: Instruction line shown to students
        points: Free-form points label (empty unless authored)
        questions: Questions of this section in number order
        section_type: Question type shared by the section
    """

    name: str
    description: str
    questions: Tuple[Question, ...]
    section_type: QuestionType
    points: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "points": self.points,
            "section_type": self.section_type.value,
            "questions": [q.number for q in self.questions],
        }


@dataclass(frozen=True)
class Exam:
    """
    Complete imported exam (immutable).

    Sections hold references to the same Question objects as the flat
    ``questions`` tuple; the serialized form stores questions once and lists
    section membership by number.

    Attributes:
        title: Exam title, usually the uploaded file name without extension
        time_limit: Minutes allowed
        questions: All questions, section 1 first, number order within each
        sections: One entry per populated section
        answers: Global question number -> correct answer. Only multiple
            choice and short answer questions appear here
        images: Every image extracted from the container

    Invariants:
        - question numbers are unique

    Example:
        >>> exam = Exam(title="De thi thu", questions=(q101, q201))
        >>> exam.get_question(201).section_number
        2
    """

    title: str
    questions: Tuple[Question, ...] = ()
    sections: Tuple[ExamSection, ...] = ()
    answers: Dict[int, str] = field(default_factory=dict)
    images: Tuple[ImageRecord, ...] = ()
    time_limit: int = DEFAULT_TIME_LIMIT

    def __post_init__(self) -> None:
        """Validate question number uniqueness."""
        seen = set()
        for q in self.questions:
            if q.number in seen:
                raise ValueError(f"Duplicate question number in exam: {q.number}")
            seen.add(q.number)

    @cached_property
    def _by_number(self) -> Dict[int, Question]:
        return {q.number: q for q in self.questions}

    def get_question(self, number: int) -> Optional[Question]:
        return self._by_number.get(number)

    def questions_in_section(self, section: int) -> List[Question]:
        return [q for q in self.questions if q.section_number == section]

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_dict(self) -> dict:
        """
        Serialize to dictionary for JSON storage.

        Note: answer-key keys become strings (JSON object keys); images are
        stored once at exam level and referenced by id from questions.
        """
        questions = []
        for q in self.questions:
            d = q.to_dict()
            d["images"] = [img.id for img in q.images]
            questions.append(d)
        return {
            "title": self.title,
            "time_limit": self.time_limit,
            "questions": questions,
            "sections": [s.to_dict() for s in self.sections],
            "answers": {str(k): v for k, v in self.answers.items()},
            "images": [img.to_dict() for img in self.images],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Exam:
        images = tuple(ImageRecord.from_dict(i) for i in data.get("images", []))
        image_by_id = {img.id: img for img in images}

        questions = []
        for qd in data.get("questions", []):
            qd = dict(qd)
            qd["images"] = [
                image_by_id[ref].to_dict() if isinstance(ref, str) else ref
                for ref in qd.get("images", [])
                if not isinstance(ref, str) or ref in image_by_id
            ]
            questions.append(Question.from_dict(qd))
        by_number = {q.number: q for q in questions}

        sections = tuple(
            ExamSection(
                name=sd.get("name", ""),
                description=sd.get("description", ""),
                points=sd.get("points", ""),
                section_type=QuestionType(sd.get("section_type", QuestionType.UNKNOWN.value)),
                questions=tuple(by_number[n] for n in sd.get("questions", []) if n in by_number),
            )
            for sd in data.get("sections", [])
        )

        return cls(
            title=data.get("title", ""),
            time_limit=data.get("time_limit", DEFAULT_TIME_LIMIT),
            questions=tuple(questions),
            sections=sections,
            answers={int(k): v for k, v in data.get("answers", {}).items()},
            images=images,
        )

    def __repr__(self) -> str:
        return (
            f"Exam({self.title!r}, questions={len(self.questions)}, "
            f"sections={len(self.sections)}, images={len(self.images)})"
        )
