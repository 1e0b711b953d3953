"""
Module: questions

Purpose:
    Provides the Question dataclass - the public, persisted form of one exam
    question. Produced by the question normalizer, owned by an Exam and read
    by the score calculator. Immutable once produced.

Key Functions:
    - Question.section_number: Section recovered from the global number
    - Question.is_graded: Whether a correct answer is known
    - Question.to_dict() / Question.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .images.ImageRecord

Used By:
    - core.models.exams.Exam
    - extractor.normalizer
    - scoring.calculator

Numbering:
    Question numbers are global and encode their section:
    ``number = section * 100 + in_section_number`` so "Câu 3" of PHẦN 2
    becomes 203 and ``number // 100`` always gives the section back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .images import ImageRecord


SECTION_MULTIPLIER = 100
VALID_SECTIONS = (1, 2, 3)


class QuestionType(str, Enum):
    """Kind of question, one per exam section."""
    MULTIPLE_CHOICE = "multiple_choice"  # PHẦN 1
    TRUE_FALSE = "true_false"            # PHẦN 2
    SHORT_ANSWER = "short_answer"        # PHẦN 3
    WRITING = "writing"                  # Legacy, graded like short answer
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class QuestionOption:
    """
    One lettered option (A-D) or true/false statement (a-d).

    Attributes:
        letter: "A".."D" for multiple choice, "a".."d" for true/false
        text: Display text, HTML-escaped with math spans preserved
    """

    letter: str
    text: str

    def to_dict(self) -> dict:
        return {"letter": self.letter, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> QuestionOption:
        return cls(letter=data["letter"], text=data.get("text", ""))


@dataclass(frozen=True, slots=True)
class SectionInfo:
    """Section metadata attached to each question ("1", name, points)."""

    letter: str
    name: str
    points: str = ""

    def to_dict(self) -> dict:
        return {"letter": self.letter, "name": self.name, "points": self.points}

    @classmethod
    def from_dict(cls, data: dict) -> SectionInfo:
        return cls(
            letter=data["letter"],
            name=data.get("name", ""),
            points=data.get("points", ""),
        )


def make_question_number(section: int, in_section_number: int) -> int:
    """
    Compute the globally unique question number.

    Args:
        section: Section number (1, 2 or 3)
        in_section_number: "Câu N" number within the section

    Returns:
        ``section * 100 + in_section_number``

    Raises:
        ValueError: If section is not 1-3 or the number is out of range
    """
    if section not in VALID_SECTIONS:
        raise ValueError(f"section must be one of {VALID_SECTIONS}: {section}")
    if not (0 < in_section_number < SECTION_MULTIPLIER):
        raise ValueError(
            f"in-section number must be 1-{SECTION_MULTIPLIER - 1}: {in_section_number}"
        )
    return section * SECTION_MULTIPLIER + in_section_number


@dataclass(frozen=True)
class Question:
    """
    Public question representation (immutable).

    Attributes:
        number: Global number, ``section * 100 + in_section_number``
        text: Question body, HTML-escaped except for $...$ / $$...$$ spans
        question_type: Kind of question
        options: Lettered options (multiple choice) or statements (true/false)
        correct_answer: Resolved answer or None. Multiple choice holds a
            letter, short answer the verbatim answer text, true/false a
            comma list of true statements when one has been authored
        section: Section metadata
        part: Section label like "PHẦN 1"
        solution: Worked solution text ("Lời giải" block), may be empty
        images: Images attached to the question
        tf_statements: Statement letter -> text for true/false questions

    Invariants:
        - number // 100 is the section number (1-3)

    Example:
        >>> q = Question(number=102, text="Tính $x^2$", question_type=QuestionType.MULTIPLE_CHOICE)
        >>> q.section_number
        1
    """

    number: int
    text: str
    question_type: QuestionType
    options: Tuple[QuestionOption, ...] = ()
    correct_answer: Optional[str] = None
    section: Optional[SectionInfo] = None
    part: str = ""
    solution: str = ""
    images: Tuple[ImageRecord, ...] = ()
    tf_statements: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the section encoded in the number."""
        if self.number // SECTION_MULTIPLIER not in VALID_SECTIONS:
            raise ValueError(f"question number does not encode a section: {self.number}")

    @property
    def section_number(self) -> int:
        return self.number // SECTION_MULTIPLIER

    @property
    def in_section_number(self) -> int:
        return self.number % SECTION_MULTIPLIER

    @property
    def is_graded(self) -> bool:
        return bool(self.correct_answer)

    def to_dict(self) -> dict:
        d = {
            "number": self.number,
            "text": self.text,
            "type": self.question_type.value,
            "options": [opt.to_dict() for opt in self.options],
            "correct_answer": self.correct_answer,
            "part": self.part,
            "solution": self.solution,
            "images": [img.to_dict() for img in self.images],
        }
        if self.section is not None:
            d["section"] = self.section.to_dict()
        if self.tf_statements:
            d["tf_statements"] = dict(self.tf_statements)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        return cls(
            number=data["number"],
            text=data.get("text", ""),
            question_type=QuestionType(data.get("type", QuestionType.UNKNOWN.value)),
            options=tuple(QuestionOption.from_dict(o) for o in data.get("options", [])),
            correct_answer=data.get("correct_answer"),
            section=SectionInfo.from_dict(data["section"]) if data.get("section") else None,
            part=data.get("part", ""),
            solution=data.get("solution", ""),
            images=tuple(ImageRecord.from_dict(i) for i in data.get("images", [])),
            tf_statements=dict(data.get("tf_statements", {})),
        )

    def __repr__(self) -> str:
        return (
            f"Question({self.number}, type={self.question_type.value}, "
            f"answer={self.correct_answer!r}, options={len(self.options)})"
        )
