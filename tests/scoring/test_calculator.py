"""
Tests for scoring.calculator

Test Coverage:
- Per-section points and counts
- True/false ladder and submission formats
- Short-answer normalization
- Totals, percentage rounding, empty exams
"""

import pytest

from math_exam_toolkit.core.models import Exam, Question, QuestionOption, QuestionType
from math_exam_toolkit.core.schemas.validator import ValidationError
from math_exam_toolkit.scoring.calculator import (
    calculate_score,
    calculate_true_false_points,
    normalize_answer,
    parse_true_false_submission,
)

TF_OPTIONS = tuple(QuestionOption(letter, f"Ý {letter}") for letter in "abcd")


def _mc(number, answer=None):
    return Question(number=number, text="mc", question_type=QuestionType.MULTIPLE_CHOICE,
                    correct_answer=answer)


def _tf(number, answer=None, options=TF_OPTIONS):
    return Question(number=number, text="tf", question_type=QuestionType.TRUE_FALSE,
                    options=options, correct_answer=answer)


def _sa(number, answer=None):
    return Question(number=number, text="sa", question_type=QuestionType.SHORT_ANSWER,
                    correct_answer=answer)


@pytest.fixture
def exam():
    return Exam(title="Đề thử", questions=(
        _mc(101, "B"),
        _mc(102, "A"),
        _tf(201, "a,c"),
        _sa(301, "1,5"),
        _sa(302, "-2"),
    ))


class TestCalculateTrueFalsePoints:
    """Tests for the true/false ladder."""

    @pytest.mark.parametrize("count,points", [(0, 0.0), (1, 0.1), (2, 0.25), (3, 0.5), (4, 1.0)])
    def test_ladder(self, count, points):
        assert calculate_true_false_points(count) == points


class TestNormalizeAnswer:
    """Tests for normalize_answer."""

    @pytest.mark.parametrize("raw,expected", [
        ("1,5", "1.5"),
        (" - 2 ", "-2"),
        ("X = 3", "x=3"),
    ])
    def test_normalized(self, raw, expected):
        assert normalize_answer(raw) == expected


class TestParseTrueFalseSubmission:
    """Tests for parse_true_false_submission."""

    def test_json_object_then_true_keys(self):
        assert parse_true_false_submission('{"a": true, "b": false, "C": true}') == {"a", "c"}

    def test_json_non_boolean_values_then_not_true(self):
        assert parse_true_false_submission('{"a": "true", "b": 1}') == set()

    def test_comma_list_then_letters(self):
        assert parse_true_false_submission("A, c") == {"a", "c"}

    def test_json_array_then_read_as_comma_list(self):
        assert parse_true_false_submission('["a"]') == {'["a"]'}


class TestCalculateScore:
    """Tests for calculate_score."""

    def test_all_correct_then_full_marks(self, exam):
        breakdown = calculate_score({101: "b", 102: "A", 201: "a,c", 301: "1.5", 302: " - 2 "}, exam)

        assert breakdown.multiple_choice.correct == 2
        assert breakdown.true_false.correct == 1
        assert breakdown.short_answer.correct == 2
        assert breakdown.total_score == 2.5
        assert breakdown.max_score == 2.5
        assert breakdown.percentage == 100

    def test_no_answers_then_zero(self, exam):
        breakdown = calculate_score({}, exam)

        assert breakdown.total_score == 0.0
        assert breakdown.max_score == 2.5
        assert breakdown.true_false.details == {}

    def test_true_false_three_matching_then_half_point_partial(self, exam):
        breakdown = calculate_score({201: '{"a": true, "b": false, "c": true, "d": true}'}, exam)

        assert breakdown.true_false.points == 0.5
        assert breakdown.true_false.partial == 1
        assert breakdown.true_false.correct == 0
        assert breakdown.true_false.details[201].correct_count == 3

    def test_true_false_only_first_claimed_then_three_matching(self, exam):
        breakdown = calculate_score({201: '{"a": true, "b": false, "c": false, "d": false}'}, exam)

        assert breakdown.true_false.details[201].correct_count == 3
        assert breakdown.true_false.points == 0.5

    def test_one_question_per_section_then_full_marks(self):
        exam = Exam(title="t", questions=(_mc(101, "B"), _tf(201, "a,b"), _sa(301, "3.14")))

        breakdown = calculate_score({101: "B", 201: "a,b", 301: "3,14"}, exam)

        assert breakdown.multiple_choice.points == 0.25
        assert breakdown.true_false.details[201].correct_count == 4
        assert breakdown.true_false.points == 1.0
        assert breakdown.short_answer.points == 0.5
        assert breakdown.total_score == 1.75
        assert breakdown.max_score == 1.75
        assert breakdown.percentage == 100

    def test_true_false_structured_payload_then_scored(self, exam):
        breakdown = calculate_score({"201": {"a": True, "b": False, "c": True, "d": False}}, exam)

        assert breakdown.true_false.points == 1.0

    def test_true_false_without_key_then_not_scored(self):
        exam = Exam(title="t", questions=(_tf(201),))

        breakdown = calculate_score({201: "a,b"}, exam)

        assert breakdown.true_false.total == 1
        assert breakdown.true_false.points == 0.0
        assert breakdown.max_score == 1.0

    def test_true_false_without_statements_then_not_scored(self):
        exam = Exam(title="t", questions=(_tf(201, "a", options=()),))

        assert calculate_score({201: "a"}, exam).true_false.points == 0.0

    def test_string_keys_then_coerced(self, exam):
        breakdown = calculate_score({"101": "B", "301": "1,5"}, exam)

        assert breakdown.total_score == 0.75

    def test_non_numeric_key_then_raises(self, exam):
        with pytest.raises(ValidationError):
            calculate_score({"câu 1": "A"}, exam)

    def test_unknown_question_numbers_then_ignored(self, exam):
        assert calculate_score({999: "A"}, exam).total_score == 0.0

    def test_half_percentage_then_rounded_up(self):
        exam = Exam(title="t", questions=tuple(_mc(100 + n, "A") for n in range(1, 9)))

        breakdown = calculate_score({101: "A"}, exam)

        assert breakdown.max_score == 2.0
        assert breakdown.percentage == 13

    def test_empty_exam_then_zero_percentage(self):
        breakdown = calculate_score({101: "A"}, Exam(title="empty"))

        assert breakdown.max_score == 0.0
        assert breakdown.percentage == 0

    def test_same_input_then_identical_result(self, exam):
        answers = {302: "-2", 101: "B", 201: "a"}

        first = calculate_score(answers, exam)
        second = calculate_score(dict(reversed(list(answers.items()))), exam)

        assert first == second
