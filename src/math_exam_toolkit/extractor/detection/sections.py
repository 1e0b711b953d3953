"""
Module: extractor.detection.sections

Purpose:
    Section heading detection - finds where "PHẦN 1" (multiple choice),
    "PHẦN 2" (true/false) and "PHẦN 3" (short answer) begin in the
    paragraph list and turns the starts into half-open ranges.

Key Functions:
    - detect_sections(): Single pass over paragraphs -> SectionBounds

Key Classes:
    - SectionBounds: Start index of each section

Used By:
    - extractor.pipeline
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Pattern, Sequence, Tuple

from ..paragraphs import ParagraphRecord

logger = logging.getLogger(__name__)

PART1_PATTERNS: Tuple[Pattern[str], ...] = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"PHẦN\s*1",
    r"PH[ẦAÀ]N\s*1",
    r"PHẦN\s+I[.\s]",
    r"Phần\s*1",
    r"I\.\s*TR[ẮAĂ]C\s*NGHI[ỆEÊ]M",
))

PART2_PATTERNS: Tuple[Pattern[str], ...] = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"PHẦN\s*2",
    r"PH[ẦAÀ]N\s*2",
    r"PHẦN\s+II[.\s]",
    r"Phần\s*2",
    r"II\.\s*[ĐD][ÚU]NG\s*SAI",
    r"ĐÚNG\s*SAI",
))

PART3_PATTERNS: Tuple[Pattern[str], ...] = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"PHẦN\s*3",
    r"PH[ẦAÀ]N\s*3",
    r"PHẦN\s+III[.\s]",
    r"Phần\s*3",
    r"III\.\s*TR[ẢAẢ]\s*L[ỜOỞ]I",
    r"TRẢ\s*LỜI\s*NG[ẮAĂ]N",
))


@dataclass(frozen=True)
class SectionBounds:
    """
    Paragraph index where each section starts.

    A section that was not found starts at ``len(paragraphs)`` (section 1
    defaults to 0), so its range is empty unless it is section 1.

    Example:
        >>> bounds = SectionBounds(part1_start=2, part2_start=10, part3_start=18)
        >>> bounds.ranges(25)[2]
        (10, 18)
    """
    part1_start: int
    part2_start: int
    part3_start: int

    def ranges(self, total: int) -> Dict[int, Tuple[int, int]]:
        """Half-open [start, end) paragraph ranges keyed by section number."""
        return {
            1: (self.part1_start, self.part2_start),
            2: (self.part2_start, self.part3_start),
            3: (self.part3_start, total),
        }


def _matches_any(patterns: Sequence[Pattern[str]], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def detect_sections(paragraphs: List[ParagraphRecord]) -> SectionBounds:
    """
    Locate the three section headings in one pass.

    Section 2 is only accepted after the section 1 start found so far and
    section 3 only after both, so "ĐÚNG SAI" mentioned inside section 3
    prose cannot move section 2 backwards. The first match of each wins.

    Args:
        paragraphs: Segmented document paragraphs

    Returns:
        SectionBounds; missing section 1 -> 0, missing 2/3 -> len(paragraphs)
    """
    part1 = part2 = part3 = -1

    for i, para in enumerate(paragraphs):
        text = para.text

        if part1 == -1 and _matches_any(PART1_PATTERNS, text):
            part1 = i

        if part2 == -1 and i > part1 and _matches_any(PART2_PATTERNS, text):
            part2 = i

        if part3 == -1 and i > max(part1, part2) and _matches_any(PART3_PATTERNS, text):
            part3 = i

    total = len(paragraphs)
    bounds = SectionBounds(
        part1_start=part1 if part1 != -1 else 0,
        part2_start=part2 if part2 != -1 else total,
        part3_start=part3 if part3 != -1 else total,
    )
    logger.debug(f"Section bounds: {bounds}")
    return bounds
