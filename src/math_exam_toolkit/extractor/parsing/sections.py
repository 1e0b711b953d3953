"""
Module: extractor.parsing.sections

Purpose:
    Per-section parsing strategies. The three sections share one state
    machine and differ only in the patterns below.

Key Classes:
    - SectionStrategy: Patterns and switches for one section

Constants:
    - MULTIPLE_CHOICE: PHẦN 1, options A-D, "Chọn X" / "Đáp án: X" / underline
    - TRUE_FALSE: PHẦN 2, statements a)-d), no key at parse time
    - SHORT_ANSWER: PHẦN 3, "Đáp án: ..." verbatim
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple

from math_exam_toolkit.core.models.questions import QuestionType

from .answer_key import SignalSource

QUESTION_START = re.compile(r"^C[âaÂA][uU]\s*(\d+)\s*[.:]\s*(.*)", re.IGNORECASE)
SOLUTION_START = re.compile(r"^L[ờơ]i\s*gi[ảa]i", re.IGNORECASE)
FIGURE_CAPTION = re.compile(r"^H[ìi]nh\s*\d+", re.IGNORECASE)

_SECTION_HEADER = re.compile(r"PHẦN\s*\d", re.IGNORECASE)
_MC_HEADER = re.compile(r"Trắc\s*nghiệm", re.IGNORECASE)


@dataclass(frozen=True)
class SectionStrategy:
    """
    What distinguishes one section's parser from another.

    Attributes:
        section: Section number (1-3)
        question_type: Type given to every question of the section
        header_patterns: Paragraphs matching any of these are skipped
        option_pattern: Option/statement line, group 1 letter, group 2 text
        upper_case_options: Store option letters upper-case (else lower)
        answer_patterns: (source, pattern) pairs; group 1 is the answer.
            Patterns are searched, so anchor them with ^ where needed
        upper_case_answers: Upper-case explicit answers (letter keys)
        infer_from_underline: Record underlined segments as answer signals
    """
    section: int
    question_type: QuestionType
    header_patterns: Tuple[Pattern[str], ...] = (_SECTION_HEADER,)
    option_pattern: Optional[Pattern[str]] = None
    upper_case_options: bool = True
    answer_patterns: Tuple[Tuple[SignalSource, Pattern[str]], ...] = ()
    upper_case_answers: bool = False
    infer_from_underline: bool = False

    def is_header(self, text: str) -> bool:
        return any(p.search(text) for p in self.header_patterns)

    def option_letter(self, letter: str) -> str:
        return letter.upper() if self.upper_case_options else letter.lower()


MULTIPLE_CHOICE = SectionStrategy(
    section=1,
    question_type=QuestionType.MULTIPLE_CHOICE,
    header_patterns=(_SECTION_HEADER, _MC_HEADER),
    option_pattern=re.compile(r"^([A-D])[.)]\s*(.*)"),
    answer_patterns=(
        # \b keeps "Chọn câu ..." from reading as "Chọn C"
        (SignalSource.CHOOSE, re.compile(r"Ch[oọ]n\s*([A-D])\b", re.IGNORECASE)),
        (SignalSource.ANSWER, re.compile(r"^[*\s]*[ĐD][áa]p\s*[áa]n\s*[:\s]\s*([A-D])\b", re.IGNORECASE)),
    ),
    upper_case_answers=True,
    infer_from_underline=True,
)

TRUE_FALSE = SectionStrategy(
    section=2,
    question_type=QuestionType.TRUE_FALSE,
    option_pattern=re.compile(r"^([a-d])\)\s*(.*)", re.IGNORECASE),
    upper_case_options=False,
)

SHORT_ANSWER = SectionStrategy(
    section=3,
    question_type=QuestionType.SHORT_ANSWER,
    answer_patterns=(
        (SignalSource.ANSWER, re.compile(r"^[*\s]*[ĐD][áa]p\s*[áa]n[:\s]*(.+)", re.IGNORECASE)),
    ),
)

STRATEGIES: Dict[int, SectionStrategy] = {
    s.section: s for s in (MULTIPLE_CHOICE, TRUE_FALSE, SHORT_ANSWER)
}
