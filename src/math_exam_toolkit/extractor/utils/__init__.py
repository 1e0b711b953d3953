"""
Module: extractor.utils

Purpose:
    Utility subpackage with shared helpers for WordprocessingML access
    and paragraph text clean-up.

Key Modules:
    - ooxml: Package paths and VML names
    - text: Vietnamese/LaTeX normalization and math-safe HTML escaping

Used By:
    - extractor.archive, extractor.paragraphs, extractor.normalizer
"""

from .text import (
    escape_html_preserve_latex,
    extract_markdown_underlines,
    normalize_latex,
    normalize_vietnamese,
)

__all__ = [
    "escape_html_preserve_latex",
    "extract_markdown_underlines",
    "normalize_latex",
    "normalize_vietnamese",
]
