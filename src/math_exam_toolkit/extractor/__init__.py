"""
Module: extractor

Purpose:
    Import pipeline for Word (.docx) exam documents. Reads the container,
    segments paragraphs, detects the three sections, parses questions with
    one shared state machine and assembles an immutable Exam.

Key Functions:
    - import_exam(): Main entry point for import
    - parse_word_to_exam(): Import returning only the Exam
    - validate_exam_data(): Blocking errors and warnings for an Exam

Key Classes:
    - ExtractionConfig: Configuration for import settings
    - ImportResult: Container for import output

Dependencies:
    - lxml: Document markup and relationship manifest
    - PIL: Image dimension probing

Used By:
    - math_exam_toolkit.cli
"""

from .archive import ArchiveError, InvalidArchiveError, MalformedDocumentError, MissingDocumentError
from .config import ExtractionConfig
from .diagnostics import DiagnosticsCollector, ExamValidation, validate_exam_data
from .pipeline import ImportResult, import_exam, parse_word_to_exam

__all__ = [
    "import_exam",
    "parse_word_to_exam",
    "validate_exam_data",
    "ExtractionConfig",
    "ImportResult",
    "ExamValidation",
    "DiagnosticsCollector",
    "ArchiveError",
    "InvalidArchiveError",
    "MalformedDocumentError",
    "MissingDocumentError",
]
