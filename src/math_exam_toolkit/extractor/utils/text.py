"""
Module: extractor.utils.text

Purpose:
    Text clean-up applied to every paragraph and to rendered question text:
    Unicode normalization of Vietnamese diacritics, math delimiter
    normalization, Pandoc-style underline markers, and HTML escaping that
    leaves math spans untouched.

Key Functions:
    - normalize_vietnamese(): NFC-compose combining diacritics
    - normalize_latex(): \\[..\\] and \\(..\\) to $$..$$ / $..$, whitespace collapse
    - extract_markdown_underlines(): Pull out "[B]{.underline}" markers
    - escape_html_preserve_latex(): Escape & < > outside math spans

Used By:
    - extractor.paragraphs
    - extractor.normalizer
"""

from __future__ import annotations

import re
import unicodedata
from typing import List, Tuple

_DISPLAY_MATH = re.compile(r"\\\[([\s\S]*?)\\\]")
_INLINE_MATH = re.compile(r"\\\(([\s\S]*?)\\\)")
_DOLLAR_RUN = re.compile(r"\${3,}")
_WHITESPACE = re.compile(r"\s+")

_MARKDOWN_UNDERLINE = re.compile(r"\[([A-Da-d])\]\{\.underline\}")

# $$...$$ must be protected before $...$ so display spans stay whole
_DISPLAY_SPAN = re.compile(r"\$\$([\s\S]*?)\$\$")
_INLINE_SPAN = re.compile(r"\$(?!\$)([\s\S]*?)\$(?!\$)")
_PLACEHOLDER = "__LATEX_BLOCK_{}__"


def normalize_vietnamese(text: str) -> str:
    """Compose decomposed diacritics (NFC) so regexes see one code point per letter."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def normalize_latex(text: str) -> str:
    """
    Normalize math delimiters and whitespace.

    Example:
        >>> normalize_latex("Tính  \\\\(x^2\\\\) và \\\\[y\\\\]")
        'Tính $x^2$ và $$y$$'
    """
    if not text:
        return ""
    text = _DISPLAY_MATH.sub(r"$$\1$$", text)
    text = _INLINE_MATH.sub(r"$\1$", text)
    text = _DOLLAR_RUN.sub("$$", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def extract_markdown_underlines(text: str) -> Tuple[str, List[str]]:
    """
    Find "[X]{.underline}" markers (X in A-D, either case).

    Returns:
        (text with each marker replaced by its bare letter, letters found)
    """
    letters = _MARKDOWN_UNDERLINE.findall(text)
    if not letters:
        return text, []
    return _MARKDOWN_UNDERLINE.sub(r"\1", text), letters


def escape_html_preserve_latex(text: str) -> str:
    """
    Escape &, < and > for safe rendering while keeping math spans verbatim.

    Math spans are swapped for placeholder tokens, the remaining prose is
    escaped, then the spans are put back.

    Example:
        >>> escape_html_preserve_latex("a < b và $x < y$")
        'a &lt; b và $x < y$'
    """
    if not text:
        return ""

    blocks: List[str] = []

    def protect(match: re.Match) -> str:
        blocks.append(match.group(0))
        return _PLACEHOLDER.format(len(blocks) - 1)

    text = _DISPLAY_SPAN.sub(protect, text)
    text = _INLINE_SPAN.sub(protect, text)

    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    for i, block in enumerate(blocks):
        text = text.replace(_PLACEHOLDER.format(i), block, 1)
    return text
