"""
Tests for extractor.diagnostics

Test Coverage:
- ImportIssue: serialization
- DiagnosticsCollector: Thread-safe issue collection
- ImportDiagnosticsReport: Report generation and JSON output
- validate_exam_data: blocking errors, warnings, tallies
"""
import json
import threading

import pytest

from math_exam_toolkit.core.models import Exam, Question, QuestionType
from math_exam_toolkit.extractor.diagnostics import (
    NO_QUESTIONS_ERROR,
    DiagnosticsCollector,
    ImportDiagnosticsReport,
    ImportIssue,
    validate_exam_data,
)


class TestImportIssue:
    """Tests for ImportIssue dataclass."""

    def test_to_dict_when_no_question_then_key_omitted(self):
        issue = ImportIssue(issue_type="image_extraction", source_name="de_thi", message="m")

        d = issue.to_dict()

        assert d == {"issue_type": "image_extraction", "source_name": "de_thi", "message": "m"}


class TestDiagnosticsCollector:
    """Tests for DiagnosticsCollector class."""

    def test_add_duplicate_question(self):
        collector = DiagnosticsCollector()

        collector.add_duplicate_question("de_thi", section=2, in_section_number=3)

        issue = collector.generate_report().issues[0]
        assert issue.issue_type == "duplicate_question"
        assert issue.question_number == 203
        assert "Câu 3" in issue.message

    def test_issue_count_when_added_from_threads_then_all_recorded(self):
        collector = DiagnosticsCollector()

        def worker():
            for n in range(1, 51):
                collector.add_missing_answer("de_thi", 100 + n)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert collector.issue_count == 200


class TestImportDiagnosticsReport:
    """Tests for ImportDiagnosticsReport."""

    def test_summary_by_type_and_json(self, tmp_path):
        collector = DiagnosticsCollector()
        collector.add_missing_text("b.docx", 101)
        collector.add_missing_text("a.docx", 102)
        collector.add_image_failure("a.docx", "bad crc", filename="image3.png", images_kept=2)

        report = collector.generate_report()
        path = tmp_path / "diag" / "report.json"
        report.save(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["source_documents"] == ["a.docx", "b.docx"]
        assert data["summary_by_type"] == {"missing_text": 2, "image_extraction": 1}
        assert data["issues"][2]["details"]["filename"] == "image3.png"
        assert "Thiếu nội dung" in report.to_json()

    def test_from_issues_when_empty_then_zero(self):
        report = ImportDiagnosticsReport.from_issues([], set())

        assert report.total_issues == 0
        assert report.summary_by_type == {}


class TestValidateExamData:
    """Tests for validate_exam_data."""

    def test_zero_questions_then_blocking_error(self):
        result = validate_exam_data(Exam(title="empty"))

        assert not result.valid
        assert result.errors == [NO_QUESTIONS_ERROR]

    def test_question_without_text_then_warning_only(self):
        exam = Exam(title="t", questions=(
            Question(number=101, text="  ", question_type=QuestionType.MULTIPLE_CHOICE, correct_answer="A"),
            Question(number=301, text="x", question_type=QuestionType.SHORT_ANSWER),
        ))

        result = validate_exam_data(exam)

        assert result.valid
        assert result.warnings == ["Câu 101: Thiếu nội dung câu hỏi"]

    def test_tallies_then_section_counts_and_answer_coverage(self):
        exam = Exam(title="t", questions=(
            Question(number=101, text="a", question_type=QuestionType.MULTIPLE_CHOICE, correct_answer="A"),
            Question(number=102, text="b", question_type=QuestionType.MULTIPLE_CHOICE),
            Question(number=201, text="c", question_type=QuestionType.TRUE_FALSE),
            Question(number=301, text="d", question_type=QuestionType.SHORT_ANSWER, correct_answer="2"),
        ))

        result = validate_exam_data(exam)

        assert result.section_counts == {1: 2, 2: 1, 3: 1}
        assert (result.with_answer, result.without_answer) == (2, 2)
        assert result.to_dict()["section_counts"] == {"1": 2, "2": 1, "3": 1}

    def test_collector_given_then_missing_answers_recorded_except_true_false(self):
        exam = Exam(title="t", questions=(
            Question(number=102, text="b", question_type=QuestionType.MULTIPLE_CHOICE),
            Question(number=201, text="c", question_type=QuestionType.TRUE_FALSE),
        ))
        collector = DiagnosticsCollector()

        validate_exam_data(exam, collector)

        issues = collector.generate_report().issues
        assert [(i.issue_type, i.question_number) for i in issues] == [("missing_answer", 102)]
