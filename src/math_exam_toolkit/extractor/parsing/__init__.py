"""
Module: extractor.parsing

Purpose:
    Section parsing subpackage. One state machine, three strategies.

Key Modules:
    - state_machine: SectionStateMachine, parse_section, attach_images
    - sections: SectionStrategy and the per-section instances
    - answer_key: Answer signals and their resolution

Used By:
    - extractor.pipeline
"""

from .answer_key import AnswerSignal, SignalSource, resolve_answer
from .sections import MULTIPLE_CHOICE, SHORT_ANSWER, STRATEGIES, TRUE_FALSE, SectionStrategy
from .state_machine import (
    ParsedQuestion,
    ParserState,
    SectionStateMachine,
    attach_images,
    parse_section,
)

__all__ = [
    "AnswerSignal",
    "SignalSource",
    "resolve_answer",
    "MULTIPLE_CHOICE",
    "SHORT_ANSWER",
    "STRATEGIES",
    "TRUE_FALSE",
    "SectionStrategy",
    "ParsedQuestion",
    "ParserState",
    "SectionStateMachine",
    "attach_images",
    "parse_section",
]
