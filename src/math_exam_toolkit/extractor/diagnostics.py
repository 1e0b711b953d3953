"""
Module: extractor.diagnostics

Captures data-quality issues during an import and generates diagnostic
reports for analysis, plus the caller-facing exam validation check.

Structure:
- Each issue carries the source document name and, where it applies,
  the question number it concerns
- Issues never stop an import; only ``ExamValidation.errors`` is blocking
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from math_exam_toolkit.core.models.exams import Exam
from math_exam_toolkit.core.models.questions import QuestionType

logger = logging.getLogger(__name__)

NO_QUESTIONS_ERROR = "Không tìm thấy câu hỏi nào trong file"

# Types whose answer key the importer is expected to infer
_KEYED_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.SHORT_ANSWER)


@dataclass
class ImportIssue:
    """
    A single import issue with diagnostic context.

    Fields:
    - issue_type: "image_extraction", "duplicate_question", "missing_text"
      or "missing_answer"
    - details: Free-form context, e.g. {"filename": "image3.emf"}
    """
    issue_type: str
    source_name: str
    message: str
    question_number: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "issue_type": self.issue_type,
            "source_name": self.source_name,
            "message": self.message,
        }
        if self.question_number is not None:
            d["question_number"] = self.question_number
        if self.details:
            d["details"] = self.details
        return d


class DiagnosticsCollector:
    """
    Thread-safe collector for import issues.

    One collector per import; the pipeline passes it down to the stages
    that can degrade.
    """

    def __init__(self):
        self._issues: List[ImportIssue] = []
        self._lock = threading.Lock()
        self._sources: Set[str] = set()

    def _add(self, issue: ImportIssue) -> None:
        with self._lock:
            self._issues.append(issue)
            self._sources.add(issue.source_name)

    def add_image_failure(
        self,
        source_name: str,
        error: str,
        filename: str = "",
        images_kept: int = 0,
    ) -> None:
        """Record a media read failure; images read before it are kept."""
        target = f" at {filename}" if filename else ""
        self._add(ImportIssue(
            issue_type="image_extraction",
            source_name=source_name,
            message=f"Image extraction stopped{target}: {error} ({images_kept} kept)",
            details={"filename": filename, "images_kept": images_kept},
        ))

    def add_duplicate_question(
        self,
        source_name: str,
        section: int,
        in_section_number: int,
    ) -> None:
        """Record a repeated "Câu n" inside one section (later copy dropped)."""
        number = section * 100 + in_section_number
        self._add(ImportIssue(
            issue_type="duplicate_question",
            source_name=source_name,
            message=f"PHẦN {section}: Câu {in_section_number} appears more than once, later copy dropped",
            question_number=number,
        ))

    def add_missing_text(self, source_name: str, question_number: int) -> None:
        """Record a question without body text."""
        self._add(ImportIssue(
            issue_type="missing_text",
            source_name=source_name,
            message=f"Câu {question_number}: Thiếu nội dung câu hỏi",
            question_number=question_number,
        ))

    def add_missing_answer(self, source_name: str, question_number: int) -> None:
        """Record a gradable question whose answer key could not be inferred."""
        self._add(ImportIssue(
            issue_type="missing_answer",
            source_name=source_name,
            message=f"Câu {question_number}: no answer key found",
            question_number=question_number,
        ))

    def generate_report(self) -> "ImportDiagnosticsReport":
        with self._lock:
            return ImportDiagnosticsReport.from_issues(list(self._issues), set(self._sources))

    @property
    def issue_count(self) -> int:
        with self._lock:
            return len(self._issues)


@dataclass
class ImportDiagnosticsReport:
    """Complete diagnostics report."""
    generated_at: str
    source_documents: List[str]
    total_issues: int
    summary_by_type: Dict[str, int]
    issues: List[ImportIssue]

    @classmethod
    def from_issues(cls, issues: List[ImportIssue], sources: Set[str]) -> "ImportDiagnosticsReport":
        summary_by_type: Dict[str, int] = {}
        for issue in issues:
            summary_by_type[issue.issue_type] = summary_by_type.get(issue.issue_type, 0) + 1

        return cls(
            generated_at=datetime.now(timezone.utc).isoformat(),
            source_documents=sorted(sources),
            total_issues=len(issues),
            summary_by_type=summary_by_type,
            issues=issues,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "source_documents": self.source_documents,
            "total_issues": self.total_issues,
            "summary_by_type": self.summary_by_type,
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info(f"Import diagnostics saved: {path}")


# ─────────────────────────────────────────────────────────────────────────────
# Exam Validation
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExamValidation:
    """
    Outcome of ``validate_exam_data``.

    Only ``errors`` block an upload. ``warnings`` and the tallies are a
    reporting side-channel.
    """
    errors: List[str]
    warnings: List[str]
    section_counts: Dict[int, int]
    with_answer: int
    without_answer: int

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "section_counts": {str(k): v for k, v in self.section_counts.items()},
            "with_answer": self.with_answer,
            "without_answer": self.without_answer,
        }


def validate_exam_data(
    exam: Exam,
    diagnostics: Optional[DiagnosticsCollector] = None,
) -> ExamValidation:
    """
    Check an imported exam before it is handed to the caller.

    An exam with zero questions is a blocking error. A question with
    empty body text is reported as a warning. Per-section counts and
    answer-key coverage are tallied for display.

    Args:
        exam: Exam produced by the import pipeline
        diagnostics: Optional collector; warnings are mirrored into it

    Returns:
        ExamValidation; ``valid`` is False only for the zero-questions case

    Example:
        >>> result = validate_exam_data(exam)
        >>> result.valid, result.section_counts
        (True, {1: 12, 2: 4, 3: 6})
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not exam.questions:
        errors.append(NO_QUESTIONS_ERROR)

    section_counts = {1: 0, 2: 0, 3: 0}
    with_answer = 0
    without_answer = 0

    for question in exam.questions:
        if not question.text or not question.text.strip():
            warnings.append(f"Câu {question.number}: Thiếu nội dung câu hỏi")
            if diagnostics is not None:
                diagnostics.add_missing_text(exam.title, question.number)

        section = question.section_number
        if section in section_counts:
            section_counts[section] += 1

        if question.correct_answer:
            with_answer += 1
        else:
            without_answer += 1
            if diagnostics is not None and question.question_type in _KEYED_TYPES:
                diagnostics.add_missing_answer(exam.title, question.number)

    logger.debug(
        f"Question count: PHẦN 1={section_counts[1]}, PHẦN 2={section_counts[2]}, "
        f"PHẦN 3={section_counts[3]}"
    )
    logger.debug(f"Answers: with key={with_answer}, without={without_answer}")

    return ExamValidation(
        errors=errors,
        warnings=warnings,
        section_counts=section_counts,
        with_answer=with_answer,
        without_answer=without_answer,
    )
