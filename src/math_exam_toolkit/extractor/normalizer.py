"""
Module: extractor.normalizer

Purpose:
    Converts parse-time ParsedQuestions into public Question models and
    groups them into ExamSections. Question numbers become globally
    unique (section * 100 + n) and text is made safe for HTML rendering
    while math spans are kept verbatim.

Key Functions:
    - to_question(): ParsedQuestion -> Question
    - build_sections(): Parsed questions per section -> questions, sections, answer key

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Sequence, Tuple

from math_exam_toolkit.core.models.exams import ExamSection
from math_exam_toolkit.core.models.questions import (
    Question,
    QuestionOption,
    QuestionType,
    SectionInfo,
    make_question_number,
)

from .parsing.state_machine import ParsedQuestion
from .utils.text import escape_html_preserve_latex

logger = logging.getLogger(__name__)

SECTION_NAMES: Dict[int, str] = {
    1: "Trắc nghiệm nhiều lựa chọn",
    2: "Trắc nghiệm đúng sai",
    3: "Trắc nghiệm trả lời ngắn",
}

SECTION_DESCRIPTIONS: Dict[int, str] = {
    1: "Thí sinh chọn một phương án đúng A, B, C hoặc D",
    2: "Thí sinh chọn Đúng hoặc Sai cho mỗi ý a), b), c), d)",
    3: "Thí sinh điền đáp án số vào ô trống",
}

SECTION_TYPES: Dict[int, QuestionType] = {
    1: QuestionType.MULTIPLE_CHOICE,
    2: QuestionType.TRUE_FALSE,
    3: QuestionType.SHORT_ANSWER,
}

# Sections whose resolved answers go into Exam.answers
_KEYED_SECTIONS = (1, 3)


def part_label(section: int) -> str:
    return f"PHẦN {section}"


def to_question(parsed: ParsedQuestion) -> Question:
    """
    Build the public Question for a parsed one.

    Text, option text and solution are HTML-escaped outside math spans.
    True/false statements are also exposed as ``tf_statements``.

    Raises:
        ValueError: If the section or in-section number cannot be encoded
    """
    options = tuple(
        QuestionOption(letter=opt.letter, text=escape_html_preserve_latex(opt.text))
        for opt in parsed.options
    )
    tf_statements = (
        {opt.letter: opt.text for opt in options}
        if parsed.question_type is QuestionType.TRUE_FALSE
        else {}
    )

    return Question(
        number=make_question_number(parsed.section, parsed.number),
        text=escape_html_preserve_latex(parsed.text),
        question_type=parsed.question_type,
        options=options,
        correct_answer=parsed.correct_answer,
        section=SectionInfo(
            letter=str(parsed.section),
            name=SECTION_NAMES.get(parsed.section, ""),
        ),
        part=part_label(parsed.section),
        solution=escape_html_preserve_latex(parsed.solution),
        images=tuple(parsed.images),
        tf_statements=tf_statements,
    )


def build_sections(
    parsed_by_section: Mapping[int, Sequence[ParsedQuestion]],
) -> Tuple[List[Question], List[ExamSection], Dict[int, str]]:
    """
    Normalize every section and assemble exam-level structures.

    Sections are emitted in order 1, 2, 3; a section with no questions is
    omitted.

    Args:
        parsed_by_section: Section number -> parsed questions (sorted)

    Returns:
        (flat question list, populated sections, answer key)

    Example:
        >>> questions, sections, answers = build_sections({1: parsed_mc, 2: [], 3: parsed_sa})
        >>> [s.name for s in sections]
        ['PHẦN 1. Trắc nghiệm nhiều lựa chọn', 'PHẦN 3. Trắc nghiệm trả lời ngắn']
    """
    questions: List[Question] = []
    sections: List[ExamSection] = []
    answers: Dict[int, str] = {}

    for section in sorted(parsed_by_section):
        parsed = parsed_by_section[section]
        if not parsed:
            continue

        section_questions = [to_question(pq) for pq in parsed]
        questions.extend(section_questions)

        if section in _KEYED_SECTIONS:
            for q in section_questions:
                if q.correct_answer:
                    answers[q.number] = q.correct_answer

        sections.append(ExamSection(
            name=f"{part_label(section)}. {SECTION_NAMES[section]}",
            description=SECTION_DESCRIPTIONS[section],
            questions=tuple(section_questions),
            section_type=SECTION_TYPES[section],
        ))
        logger.debug(f"{part_label(section)}: {len(section_questions)} question(s)")

    return questions, sections, answers
