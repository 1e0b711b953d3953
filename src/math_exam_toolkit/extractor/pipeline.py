"""
Module: extractor.pipeline

Purpose:
    Main pipeline orchestrator for Word (.docx) exam import. Coordinates
    archive reading, image extraction, paragraph segmentation, section
    detection, section parsing and normalization to produce an Exam.

Key Functions:
    - import_exam(): Main entry point, returns exam + validation + timing
    - parse_word_to_exam(): Thin form returning only the Exam

Key Classes:
    - ImportResult: Container for import output

Dependencies:
    - lxml: Document tree (via extractor.archive / extractor.paragraphs)
    - Pillow: Image sizes (via extractor.images)

Used By:
    - cli: ``math-exam import``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from math_exam_toolkit.core.models.exams import Exam

from .archive import ArchiveSource, open_archive
from .config import ExtractionConfig
from .detection.sections import detect_sections
from .diagnostics import (
    DiagnosticsCollector,
    ExamValidation,
    ImportDiagnosticsReport,
    validate_exam_data,
)
from .images import extract_images
from .normalizer import build_sections, part_label
from .paragraphs import extract_paragraphs
from .parsing.sections import STRATEGIES
from .parsing.state_machine import ParsedQuestion, parse_section
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """
    Result of importing a document.

    Attributes:
        exam: The assembled exam (possibly with zero questions)
        validation: Blocking errors, warnings and tallies
        timing: Per-phase durations
        diagnostics: Issue report when diagnostics were collected
    """
    exam: Exam
    validation: ExamValidation
    timing: TimingLog
    diagnostics: Optional[ImportDiagnosticsReport] = None

    @property
    def valid(self) -> bool:
        return self.validation.valid


def derive_title(filename: str) -> str:
    """Exam title from an upload name: the first ".docx" is removed."""
    return filename.replace(".docx", "", 1)


def import_exam(
    source: ArchiveSource,
    *,
    title: Optional[str] = None,
    config: Optional[ExtractionConfig] = None,
    diagnostics_collector: Optional[DiagnosticsCollector] = None,
) -> ImportResult:
    """
    Import an exam from a Word document.

    Pipeline:
    1. Open the container (fatal if it is not a .docx with document.xml)
    2. Extract embedded images (degrades to a partial list on failure)
    3. Segment paragraphs
    4. Detect the three section headings
    5. Parse each section with its strategy
    6. Normalize questions and assemble the Exam
    7. Validate (zero questions is the only blocking error)

    Args:
        source: Raw .docx bytes or a path
        title: Exam title; defaults to the file name without ".docx"
        config: Optional import configuration
        diagnostics_collector: Optional shared collector; one is created
            when omitted and ``config.run_diagnostics`` is set

    Returns:
        ImportResult with the exam, its validation and timing

    Raises:
        FileNotFoundError: If a path is given and does not exist
        ArchiveError: If the container or its document markup is unusable

    Example:
        >>> result = import_exam(Path("de_thi_thu.docx"))
        >>> result.valid, result.exam.question_count
        (True, 22)
    """
    config = config or ExtractionConfig()
    if title is None:
        title = "" if isinstance(source, (bytes, bytearray)) else derive_title(Path(source).name)

    timing_log = TimingLog()
    collector = diagnostics_collector
    if collector is None and config.run_diagnostics:
        collector = DiagnosticsCollector()

    with timed_phase(timing_log, "open_archive"):
        archive = open_archive(source)

    images = []
    if config.extract_images:
        with timed_phase(timing_log, "image_extraction"):
            images = extract_images(
                archive,
                probe_sizes=config.probe_image_sizes,
                diagnostics=collector,
                source_name=title,
            )
    logger.debug(f"Extracted {len(images)} images from {title or '<bytes>'}")

    with timed_phase(timing_log, "segmentation"):
        paragraphs = extract_paragraphs(archive.parse_document())

    with timed_phase(timing_log, "section_detection"):
        bounds = detect_sections(paragraphs)

    parsed: Dict[int, List[ParsedQuestion]] = {}
    for section, (start, end) in bounds.ranges(len(paragraphs)).items():
        with timed_phase(timing_log, "parsing", section=part_label(section)):
            parsed[section] = parse_section(
                paragraphs,
                start,
                end,
                images,
                STRATEGIES[section],
                diagnostics=collector,
                source_name=title,
            )

    with timed_phase(timing_log, "normalization"):
        questions, sections, answers = build_sections(parsed)
        exam = Exam(
            title=title,
            questions=tuple(questions),
            sections=tuple(sections),
            answers=answers,
            images=tuple(images),
            time_limit=config.time_limit,
        )

    validation = validate_exam_data(exam, collector)

    logger.info(
        f"Imported {title or '<bytes>'}: {exam.question_count} questions "
        f"({', '.join(f'{part_label(s)}={len(parsed[s])}' for s in sorted(parsed))}), "
        f"{len(exam.answers)} answer keys, {len(images)} images"
    )
    for error in validation.errors:
        logger.warning(error)
    logger.debug(timing_log.summary())

    report = collector.generate_report() if collector is not None else None
    if report is not None and report.total_issues:
        logger.info(f"Import diagnostics: {report.total_issues} issues found")

    return ImportResult(
        exam=exam,
        validation=validation,
        timing=timing_log,
        diagnostics=report,
    )


def parse_word_to_exam(
    source: ArchiveSource,
    *,
    title: Optional[str] = None,
    config: Optional[ExtractionConfig] = None,
) -> Exam:
    """Import a document and return only the Exam (validation is the caller's job)."""
    return import_exam(source, title=title, config=config).exam
