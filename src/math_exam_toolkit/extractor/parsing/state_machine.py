"""
Module: extractor.parsing.state_machine

Purpose:
    Line-oriented state machine that turns one section's paragraph slice
    into ParsedQuestions. Section differences (option syntax, answer
    statements, underline inference) come from a SectionStrategy.

Key Classes:
    - ParserState: IDLE / COLLECTING_BODY / IN_SOLUTION
    - ParsedQuestion: Mutable per-question accumulator
    - SectionStateMachine: Feeds paragraphs, emits finished questions

Key Functions:
    - parse_section(): Run the machine over paragraphs[start:end]
    - attach_images(): Resolve paragraph rIds to ImageRecords

Dependencies:
    - extractor.parsing.sections: Patterns and strategies
    - extractor.parsing.answer_key: Answer resolution at finalize time

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from math_exam_toolkit.core.models.images import ImageRecord
from math_exam_toolkit.core.models.questions import (
    SECTION_MULTIPLIER,
    QuestionOption,
    QuestionType,
)

from ..diagnostics import DiagnosticsCollector
from ..paragraphs import ParagraphRecord
from .answer_key import AnswerSignal, SignalSource, resolve_answer
from .sections import FIGURE_CAPTION, QUESTION_START, SOLUTION_START, SectionStrategy

logger = logging.getLogger(__name__)


class ParserState(Enum):
    IDLE = "idle"
    COLLECTING_BODY = "collecting_body"
    IN_SOLUTION = "in_solution"


@dataclass
class ParsedQuestion:
    """
    Question under construction. Only the state machine mutates it.

    Attributes:
        section: Section number (1-3)
        number: In-section "Câu N" number
        question_type: Taken from the section strategy
        text: Body text, set once from the body buffer
        options: Options (A-D) or true/false statements (a-d)
        correct_answer: Resolved at finalize time
        solution: Text of the "Lời giải" block
        images: Attached images, unique by id
        signals: Candidate answers in paragraph order
    """
    section: int
    number: int
    question_type: QuestionType
    text: str = ""
    options: List[QuestionOption] = field(default_factory=list)
    correct_answer: Optional[str] = None
    solution: str = ""
    images: List[ImageRecord] = field(default_factory=list)
    signals: List[AnswerSignal] = field(default_factory=list)


def attach_images(
    question: ParsedQuestion,
    rids: Sequence[str],
    images: Sequence[ImageRecord],
) -> None:
    """
    Attach the images a paragraph references.

    Each rId is matched against ImageRecord.r_id first, then against
    filenames contained in the rId. Already attached images are skipped.
    """
    for rid in rids:
        image = next((img for img in images if img.r_id == rid), None)
        if image is None:
            image = next((img for img in images if img.filename and img.filename in rid), None)
        if image is not None and all(existing.id != image.id for existing in question.images):
            question.images.append(image)


class SectionStateMachine:
    """
    Parses one section's paragraphs.

    Usage:
        >>> machine = SectionStateMachine(MULTIPLE_CHOICE, images)
        >>> for para in paragraphs[start:end]:
        ...     machine.feed(para)
        >>> questions = machine.finish()
    """

    def __init__(
        self,
        strategy: SectionStrategy,
        images: Sequence[ImageRecord] = (),
        *,
        diagnostics: Optional[DiagnosticsCollector] = None,
        source_name: str = "",
    ):
        self.strategy = strategy
        self.images = images
        self.diagnostics = diagnostics
        self.source_name = source_name

        self.state = ParserState.IDLE
        self.current: Optional[ParsedQuestion] = None
        self._body: List[str] = []
        self._solution: List[str] = []
        self._finished: List[ParsedQuestion] = []

    # ─────────────────────────────────────────────────────────────────────
    # Paragraph handling
    # ─────────────────────────────────────────────────────────────────────

    def feed(self, para: ParagraphRecord) -> None:
        """Consume one paragraph."""
        text = para.text

        if text and self.strategy.is_header(text):
            return

        match = QUESTION_START.match(text)
        if match:
            self._start_question(int(match.group(1)), match.group(2).strip(), para)
            return

        question = self.current
        if question is None:
            return

        if SOLUTION_START.match(text):
            self._flush_body()
            self.state = ParserState.IN_SOLUTION
            return

        if self.state is ParserState.COLLECTING_BODY and self._take_option(text, para):
            self._attach(para)
            return

        if self._take_answer_statement(text):
            if self.state is ParserState.IN_SOLUTION:
                self._solution.append(text)
            self._attach(para)
            return

        if self.state is ParserState.IN_SOLUTION:
            if text:
                self._solution.append(text)
            return

        # Figure captions only carry images
        if text and not FIGURE_CAPTION.match(text):
            self._body.append(text)
            self._record_underlines(para.underlined_segments)

        self._attach(para)

    def _start_question(self, number: int, rest: str, para: ParagraphRecord) -> None:
        self._finalize()
        self.current = ParsedQuestion(
            section=self.strategy.section,
            number=number,
            question_type=self.strategy.question_type,
        )
        self.state = ParserState.COLLECTING_BODY
        self._body = [rest] if rest else []
        self._solution = []
        self._record_underlines(para.underlined_segments)
        self._attach(para)

    def _take_option(self, text: str, para: ParagraphRecord) -> bool:
        pattern = self.strategy.option_pattern
        match = pattern.match(text) if pattern is not None else None
        if not match:
            return False

        question = self.current
        if not question.options:
            self._flush_body()

        letter = self.strategy.option_letter(match.group(1))
        question.options.append(QuestionOption(letter=letter, text=match.group(2).strip()))

        if self.strategy.infer_from_underline and para.has_underline:
            segments = para.underlined_segments
            if any(seg.upper() == letter or letter in seg for seg in segments):
                question.signals.append(AnswerSignal(SignalSource.UNDERLINE, letter))
            else:
                self._record_underlines(segments)
        return True

    def _take_answer_statement(self, text: str) -> bool:
        for source, pattern in self.strategy.answer_patterns:
            match = pattern.search(text)
            if match:
                value = match.group(1).strip()
                if self.strategy.upper_case_answers:
                    value = value.upper()
                self.current.signals.append(AnswerSignal(source, value))
                return True
        return False

    def _record_underlines(self, segments: Sequence[str]) -> None:
        if self.strategy.infer_from_underline:
            self.current.signals.extend(
                AnswerSignal(SignalSource.UNDERLINE, seg) for seg in segments
            )

    def _attach(self, para: ParagraphRecord) -> None:
        if para.image_rids and self.state is not ParserState.IN_SOLUTION:
            attach_images(self.current, para.image_rids, self.images)

    def _flush_body(self) -> None:
        if self._body and not self.current.text:
            self.current.text = " ".join(self._body).strip()
        self._body = []

    # ─────────────────────────────────────────────────────────────────────
    # Finalization
    # ─────────────────────────────────────────────────────────────────────

    def _finalize(self) -> None:
        question = self.current
        if question is None:
            return

        self._flush_body()
        question.solution = "\n".join(self._solution)
        question.correct_answer = resolve_answer(question.signals)

        if question.text:
            self._finished.append(question)
        else:
            logger.debug(f"PHẦN {question.section}: Câu {question.number} has no text, dropped")

        self.current = None
        self.state = ParserState.IDLE
        self._solution = []

    def finish(self) -> List[ParsedQuestion]:
        """
        Finalize the open question and return the section's questions.

        Questions are sorted by in-section number (stable). A number outside
        1-99 cannot be encoded and is dropped; a repeated number keeps its
        first occurrence.
        """
        self._finalize()

        result: List[ParsedQuestion] = []
        seen = set()
        for question in sorted(self._finished, key=lambda q: q.number):
            if not 0 < question.number < SECTION_MULTIPLIER:
                logger.warning(
                    f"PHẦN {question.section}: Câu {question.number} is out of range, dropped"
                )
                continue
            if question.number in seen:
                logger.warning(
                    f"PHẦN {question.section}: duplicate Câu {question.number}, later copy dropped"
                )
                if self.diagnostics is not None:
                    self.diagnostics.add_duplicate_question(
                        self.source_name, question.section, question.number
                    )
                continue
            seen.add(question.number)
            result.append(question)
        return result


def parse_section(
    paragraphs: Sequence[ParagraphRecord],
    start: int,
    end: int,
    images: Sequence[ImageRecord],
    strategy: SectionStrategy,
    *,
    diagnostics: Optional[DiagnosticsCollector] = None,
    source_name: str = "",
) -> List[ParsedQuestion]:
    """
    Parse ``paragraphs[start:end]`` with the given section strategy.

    Args:
        paragraphs: All document paragraphs
        start: First paragraph index (inclusive)
        end: Last paragraph index (exclusive)
        images: Extracted images for attachment
        strategy: Section behaviour
        diagnostics: Optional collector for duplicate numbers
        source_name: Document name used in diagnostics

    Returns:
        ParsedQuestions sorted by in-section number; empty for an empty range
    """
    if start < 0 or end <= start:
        return []

    machine = SectionStateMachine(
        strategy, images, diagnostics=diagnostics, source_name=source_name
    )
    for para in paragraphs[start:end]:
        machine.feed(para)

    questions = machine.finish()
    logger.debug(f"PHẦN {strategy.section}: parsed {len(questions)} question(s)")
    return questions
