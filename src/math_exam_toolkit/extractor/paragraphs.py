"""
Module: extractor.paragraphs

Purpose:
    Paragraph segmentation of the document markup. Every ``w:p`` becomes a
    ParagraphRecord carrying its normalized text, the image rIds it
    references and the text of its underlined runs, which the multiple
    choice parser uses to infer answer keys.

Key Functions:
    - extract_paragraphs(): Document tree -> ordered ParagraphRecords
    - segment_paragraph(): One ``w:p`` element -> ParagraphRecord

Key Classes:
    - ParagraphRecord: Immutable paragraph view

Dependencies:
    - lxml: Tree traversal
    - python-docx: WordprocessingML names (docx.oxml.ns.qn)
    - extractor.utils.text: Normalization

Used By:
    - extractor.pipeline
    - extractor.detection.sections
    - extractor.parsing.state_machine
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from docx.oxml.ns import qn
from lxml import etree

from .utils.ooxml import O_RELID, V_IMAGEDATA
from .utils.text import extract_markdown_underlines, normalize_latex, normalize_vietnamese

logger = logging.getLogger(__name__)

_W_P = qn("w:p")
_W_R = qn("w:r")
_W_T = qn("w:t")
_W_RPR = qn("w:rPr")
_W_U = qn("w:u")
_A_BLIP = qn("a:blip")
_R_EMBED = qn("r:embed")
_R_ID = qn("r:id")


@dataclass(frozen=True)
class ParagraphRecord:
    """
    One document paragraph after normalization.

    Attributes:
        text: Normalized text (may be empty when the paragraph only holds images)
        image_rids: Relationship IDs of referenced images, first-seen order
        underlined_segments: Trimmed text of underlined runs plus letters
            from "[X]{.underline}" markers

    Example:
        >>> p = ParagraphRecord("A. 2", underlined_segments=("A",))
        >>> p.has_underline
        True
    """
    text: str
    image_rids: Tuple[str, ...] = ()
    underlined_segments: Tuple[str, ...] = ()

    @property
    def has_underline(self) -> bool:
        return bool(self.underlined_segments)


def _run_image_rids(run: etree._Element) -> List[str]:
    rids: List[str] = []
    for blip in run.iter(_A_BLIP):
        embed = blip.get(_R_EMBED)
        if embed:
            rids.append(embed)
    for imagedata in run.iter(V_IMAGEDATA):
        rid = imagedata.get(_R_ID) or imagedata.get(O_RELID)
        if rid:
            rids.append(rid)
    return rids


def _is_underlined(run: etree._Element) -> bool:
    # Any w:u marks the run, including w:val="none"
    rpr = run.find(_W_RPR)
    return rpr is not None and rpr.find(_W_U) is not None


def segment_paragraph(p: etree._Element) -> Optional[ParagraphRecord]:
    """
    Build a ParagraphRecord from a ``w:p`` element.

    Returns:
        The record, or None when the paragraph has neither text nor images
    """
    parts: List[str] = []
    rids: List[str] = []
    underlined: List[str] = []

    for run in p.iter(_W_R):
        for rid in _run_image_rids(run):
            if rid not in rids:
                rids.append(rid)

        run_text = "".join(t.text or "" for t in run.iter(_W_T))
        if run_text.strip() and _is_underlined(run):
            underlined.append(run_text.strip())
        parts.append(run_text)

    text = normalize_vietnamese("".join(parts).strip())
    text = normalize_latex(text)
    text, marked = extract_markdown_underlines(text)
    underlined.extend(marked)

    if not text and not rids:
        return None
    return ParagraphRecord(
        text=text,
        image_rids=tuple(rids),
        underlined_segments=tuple(underlined),
    )


def extract_paragraphs(root: etree._Element) -> List[ParagraphRecord]:
    """
    Segment the whole document body into paragraphs.

    Every ``w:p`` in document order is visited, including paragraphs nested
    in tables and text boxes. A nested paragraph's runs also count towards
    its enclosing paragraph.

    Args:
        root: Root element of word/document.xml

    Returns:
        Non-empty ParagraphRecords in document order
    """
    paragraphs: List[ParagraphRecord] = []
    for p in root.iter(_W_P):
        record = segment_paragraph(p)
        if record is not None:
            paragraphs.append(record)

    logger.debug(f"Segmented {len(paragraphs)} paragraph(s)")
    return paragraphs
