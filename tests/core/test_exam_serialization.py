"""
Unit Tests for Serialization Utilities

Tests for exam JSON persistence and submitted answer maps.
"""

import json

import pytest

from math_exam_toolkit.core.models import Exam, Question, QuestionOption, QuestionType
from math_exam_toolkit.core.schemas.validator import EXAM_SCHEMA_VERSION, ValidationError
from math_exam_toolkit.core.utils.serialization import (
    deserialize_exam,
    load_answers_json,
    load_exam_json,
    normalize_answer_map,
    save_exam_json,
    serialize_exam,
)


@pytest.fixture
def exam() -> Exam:
    mc = Question(
        number=101,
        text="1 + 1 = ?",
        question_type=QuestionType.MULTIPLE_CHOICE,
        options=(QuestionOption("A", "2"), QuestionOption("B", "3")),
        correct_answer="A",
    )
    sa = Question(number=301, text="x = ?", question_type=QuestionType.SHORT_ANSWER, correct_answer="1,5")
    return Exam(title="De thi", questions=(mc, sa), answers={101: "A", 301: "1,5"})


class TestExamSerialization:
    """Tests for serialize_exam / deserialize_exam."""

    def test_serialize_when_exam_given_then_versioned_dict(self, exam):
        data = serialize_exam(exam)

        assert data["schema_version"] == EXAM_SCHEMA_VERSION
        assert data["title"] == "De thi"

    def test_deserialize_when_strict_then_passes_schema(self, exam):
        restored = deserialize_exam(serialize_exam(exam), strict=True)

        assert restored.answers == {101: "A", 301: "1,5"}
        assert restored.get_question(301).correct_answer == "1,5"

    def test_deserialize_when_version_missing_then_raises(self, exam):
        data = serialize_exam(exam)
        del data["schema_version"]

        with pytest.raises(ValidationError, match="Missing required fields"):
            deserialize_exam(data)


class TestExamFiles:
    """Tests for save_exam_json / load_exam_json."""

    def test_save_then_load_preserves_exam(self, exam, tmp_path):
        path = tmp_path / "out" / "exam.json"

        save_exam_json(exam, path)
        restored = load_exam_json(path, strict=True)

        assert restored.title == exam.title
        assert [q.number for q in restored.questions] == [101, 301]

    def test_save_when_vietnamese_text_then_written_unescaped(self, exam, tmp_path):
        path = tmp_path / "exam.json"
        vi = Exam(title="Đề thi thử", questions=exam.questions)

        save_exam_json(vi, path)

        assert "Đề thi thử" in path.read_text(encoding="utf-8")

    def test_load_when_missing_then_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_exam_json(tmp_path / "nope.json")

    def test_load_when_not_json_then_validation_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValidationError, match="Invalid JSON"):
            load_exam_json(path)


class TestAnswerMaps:
    """Tests for submitted answer coercion."""

    def test_normalize_when_string_keys_then_int_keys(self):
        assert normalize_answer_map({"101": "A", 301: "2"}) == {101: "A", 301: "2"}

    def test_normalize_when_structured_value_then_json_text(self):
        result = normalize_answer_map({"201": {"a": True, "b": False}})

        assert json.loads(result[201]) == {"a": True, "b": False}

    def test_normalize_when_value_none_then_skipped(self):
        assert normalize_answer_map({"101": None}) == {}

    def test_normalize_when_key_not_numeric_then_raises(self):
        with pytest.raises(ValidationError, match="not a question number"):
            normalize_answer_map({"abc": "A"})

    def test_load_answers_when_list_then_raises(self, tmp_path):
        path = tmp_path / "answers.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValidationError, match="JSON object"):
            load_answers_json(path)
