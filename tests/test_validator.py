# Area: Selection Tests
"""Tests for structural question validation."""

import pytest

from quiz_battle._selection import is_valid_question, validate_question


class TestCommonChecks:
    """Prompt and type checks shared by all types."""

    def test_non_dict(self):
        """Non-dict questions are rejected with their position."""
        assert validate_question("text", index=2) == ["Question 3: expected dict, got str"]

    def test_missing_prompt(self):
        """Blank prompt is reported first."""
        errors = validate_question({"type": "True/False", "question": "  ", "correctAnswer": "True"})
        assert errors == ["Question 1: question text is required"]

    def test_unknown_type(self):
        """Unrecognized type labels are reported."""
        errors = validate_question({"type": "Essay", "question": "Why?"})
        assert errors == ["Question 1: invalid question type 'Essay'"]

    def test_missing_type(self):
        """Type is required."""
        assert validate_question({"question": "?"}) == ["Question 1: question type is required"]


class TestAnswerKeys:
    """Per-type answer key schemas."""

    @pytest.mark.parametrize("question", [
        {"type": "Multiple Choice", "question": "?", "choices": ["A", "B"], "correctAnswer": "B"},
        {"type": "True/False", "question": "?", "correctAnswer": False},
        {"type": "Fill in the blanks", "question": "?", "answer": "x"},
        {"type": "Matching", "question": "?", "matching_pairs": [{"left": "a", "right": "b"}]},
    ])
    def test_valid_questions(self, question):
        """Well-formed questions of each type pass."""
        assert validate_question(question) == []
        assert is_valid_question(question) is True

    def test_choice_answer_must_be_a_choice(self):
        """correctAnswer outside choices is rejected."""
        errors = validate_question(
            {"type": "Multiple Choice", "question": "?", "choices": ["A", "B"], "correctAnswer": "C"}
        )
        assert errors == ["Question 1: field 'correctAnswer' must be one of the 'choices'"]

    def test_too_few_choices(self):
        """Multiple choice needs two options."""
        errors = validate_question(
            {"type": "Multiple Choice", "question": "?", "choices": ["A"], "correctAnswer": "A"}
        )
        assert any("at least 2" in e for e in errors)

    def test_true_false_label(self):
        """Only True/False labels are accepted."""
        errors = validate_question({"type": "True/False", "question": "?", "correctAnswer": "yes"})
        assert len(errors) == 1
        assert "must be one of" in errors[0]

    def test_blank_fill_answer(self):
        """An all-space answer is blank."""
        errors = validate_question({"type": "Fill in the blanks", "question": "?", "answer": " "})
        assert errors == ["Question 1: field 'answer' is blank"]

    def test_matching_item_errors(self):
        """Each malformed pair is reported with its index."""
        errors = validate_question({
            "type": "Matching", "question": "?",
            "matchingPairs": [{"left": "a", "right": "b"}, {"left": "c"}, "x"],
        })
        assert "Question 1: matchingPairs[1]: missing required field 'right'" in errors
        assert "Question 1: matchingPairs[2]: expected dict, got str" in errors

    def test_empty_matching_pairs(self):
        """Matching needs at least one pair."""
        errors = validate_question({"type": "Matching", "question": "?", "matchingPairs": []})
        assert errors == ["Question 1: field 'matchingPairs' needs at least 1 item(s)"]
