"""
Module: extractor.detection

Purpose:
    Detection subpackage for locating the structural markers of an exam
    document. Currently holds section heading detection.

Key Modules:
    - sections: "PHẦN 1/2/3" heading detection and paragraph ranges

Used By:
    - extractor.pipeline: Splits paragraphs before section parsing
"""

from .sections import SectionBounds, detect_sections

__all__ = ["SectionBounds", "detect_sections"]
