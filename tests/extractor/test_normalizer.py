"""
Tests for extractor.normalizer

Test Coverage:
- to_question: numbering, escaping, section metadata, tf_statements
- build_sections: section order, names, answer key contents
"""

import pytest

from math_exam_toolkit.core.models.questions import QuestionOption, QuestionType
from math_exam_toolkit.extractor.normalizer import (
    SECTION_DESCRIPTIONS,
    build_sections,
    to_question,
)
from math_exam_toolkit.extractor.parsing.state_machine import ParsedQuestion


def _parsed(section, number, qtype, **kwargs):
    return ParsedQuestion(section=section, number=number, question_type=qtype, **kwargs)


class TestToQuestion:
    """Tests for to_question."""

    def test_number_then_section_times_100(self):
        q = to_question(_parsed(2, 4, QuestionType.TRUE_FALSE, text="x"))

        assert q.number == 204
        assert q.part == "PHẦN 2"
        assert q.section.letter == "2"
        assert q.section.name == "Trắc nghiệm đúng sai"
        assert q.section.points == ""

    def test_text_and_options_then_escaped_outside_math(self):
        q = to_question(_parsed(
            1, 1, QuestionType.MULTIPLE_CHOICE,
            text="So sánh a < b và $a < b$",
            options=[QuestionOption("A", "x > 1 & y"), QuestionOption("B", "$x > 1$")],
        ))

        assert q.text == "So sánh a &lt; b và $a < b$"
        assert q.options[0].text == "x &gt; 1 &amp; y"
        assert q.options[1].text == "$x > 1$"

    def test_true_false_then_statements_exposed(self):
        q = to_question(_parsed(
            2, 1, QuestionType.TRUE_FALSE, text="x",
            options=[QuestionOption("a", "Đúng"), QuestionOption("b", "Sai")],
        ))

        assert q.tf_statements == {"a": "Đúng", "b": "Sai"}

    def test_in_section_number_out_of_range_then_raises(self):
        with pytest.raises(ValueError):
            to_question(_parsed(1, 100, QuestionType.MULTIPLE_CHOICE, text="x"))


class TestBuildSections:
    """Tests for build_sections."""

    @pytest.fixture
    def parsed(self):
        return {
            1: [
                _parsed(1, 1, QuestionType.MULTIPLE_CHOICE, text="a", correct_answer="B"),
                _parsed(1, 2, QuestionType.MULTIPLE_CHOICE, text="b"),
            ],
            2: [_parsed(2, 1, QuestionType.TRUE_FALSE, text="c", correct_answer="a,c")],
            3: [_parsed(3, 1, QuestionType.SHORT_ANSWER, text="d", correct_answer="1,5")],
        }

    def test_all_sections_then_flat_questions_in_order(self, parsed):
        questions, sections, _ = build_sections(parsed)

        assert [q.number for q in questions] == [101, 102, 201, 301]
        assert [s.name for s in sections] == [
            "PHẦN 1. Trắc nghiệm nhiều lựa chọn",
            "PHẦN 2. Trắc nghiệm đúng sai",
            "PHẦN 3. Trắc nghiệm trả lời ngắn",
        ]
        assert sections[1].description == SECTION_DESCRIPTIONS[2]
        assert sections[2].section_type is QuestionType.SHORT_ANSWER

    def test_answers_then_only_multiple_choice_and_short_answer(self, parsed):
        _, _, answers = build_sections(parsed)

        assert answers == {101: "B", 301: "1,5"}

    def test_empty_section_then_omitted(self, parsed):
        parsed[2] = []

        _, sections, _ = build_sections(parsed)

        assert [s.section_type for s in sections] == [
            QuestionType.MULTIPLE_CHOICE,
            QuestionType.SHORT_ANSWER,
        ]

    def test_sections_share_question_objects(self, parsed):
        questions, sections, _ = build_sections(parsed)

        assert sections[0].questions[0] is questions[0]
