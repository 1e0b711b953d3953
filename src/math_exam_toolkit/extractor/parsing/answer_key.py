"""
Module: extractor.parsing.answer_key

Purpose:
    Answer-key resolution from the signals a section parser collects while
    walking one question. Signals are kept in paragraph order and resolved
    once, when the question is finalized.

Resolution order:
    1. Last "Chọn X" statement
    2. Last "Đáp án: X" statement
    3. First underlined segment that is exactly one letter A-D

Key Classes:
    - SignalSource: Where a candidate answer came from
    - AnswerSignal: One candidate answer

Key Functions:
    - resolve_answer(): Signals -> correct answer or None
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

_SINGLE_LETTER = re.compile(r"^[A-D]$", re.IGNORECASE)


class SignalSource(str, Enum):
    """Origin of a candidate answer, in descending priority."""

    CHOOSE = "choose"
    ANSWER = "answer"
    UNDERLINE = "underline"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AnswerSignal:
    """A candidate answer seen in the question span."""
    source: SignalSource
    value: str


def _last_of(signals: List[AnswerSignal], source: SignalSource) -> Optional[str]:
    for signal in reversed(signals):
        if signal.source is source:
            return signal.value
    return None


def resolve_answer(signals: Iterable[AnswerSignal]) -> Optional[str]:
    """
    Pick the correct answer from the collected signals.

    Explicit statements always beat underline inference; among explicit
    statements of the same kind the last one in paragraph order wins.

    Example:
        >>> resolve_answer([
        ...     AnswerSignal(SignalSource.UNDERLINE, "C"),
        ...     AnswerSignal(SignalSource.CHOOSE, "A"),
        ...     AnswerSignal(SignalSource.CHOOSE, "B"),
        ... ])
        'B'
    """
    signals = list(signals)

    for source in (SignalSource.CHOOSE, SignalSource.ANSWER):
        value = _last_of(signals, source)
        if value:
            return value

    for signal in signals:
        if signal.source is SignalSource.UNDERLINE and _SINGLE_LETTER.match(signal.value):
            return signal.value.upper()
    return None
