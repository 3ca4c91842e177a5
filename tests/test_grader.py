# Area: Grading Tests
"""Tests for single-answer grading across the four question types."""

import logging

import pytest

from quiz_battle._grading import check_answer, grade


def _matching(difficulty="medium", pairs=5):
    return {
        "type": "Matching",
        "question": "Match them",
        "difficulty": difficulty,
        "matchingPairs": [{"left": f"L{n}", "right": f"R{n}"} for n in range(pairs)],
    }


class TestMultipleChoice:
    """Exact-match grading for multiple choice."""

    def test_correct_answer_earns_difficulty_points(self):
        """A correct hard answer is worth 5."""
        q = {"type": "Multiple Choice", "question": "?", "difficulty": "hard",
             "choices": ["Au", "Ag"], "correctAnswer": "Au"}
        assert grade(q, "Au") == {"is_correct": True, "partial_credit": 5}

    def test_surrounding_whitespace_is_ignored(self):
        """Submission and key are trimmed before comparing."""
        q = {"type": "Multiple Choice", "question": "?", "difficulty": "easy",
             "choices": ["Au", "Ag"], "correctAnswer": " Au "}
        assert grade(q, "Au  ")["partial_credit"] == 1

    def test_match_is_case_sensitive(self):
        """Choice text must match exactly."""
        q = {"type": "Multiple Choice", "question": "?", "choices": ["Au", "Ag"],
             "correctAnswer": "Au"}
        assert grade(q, "au") == {"is_correct": False, "partial_credit": 0}

    def test_missing_difficulty_counts_as_medium(self):
        """Ungraded questions are worth 3."""
        q = {"type": "Multiple Choice", "question": "?", "choices": ["A", "B"],
             "correctAnswer": "A"}
        assert grade(q, "A")["partial_credit"] == 3

    def test_snake_case_key_is_accepted(self):
        """Rows read from SQL use correct_answer."""
        q = {"type": "multiple_choice", "question": "?", "choices": ["A", "B"],
             "correct_answer": "B"}
        assert check_answer(q, "B") is True


class TestTrueFalse:
    """True/False grading."""

    def test_string_answer(self):
        """'False' matches a 'False' key."""
        q = {"type": "True/False", "question": "?", "difficulty": "easy", "correctAnswer": "False"}
        assert grade(q, "False")["is_correct"] is True

    def test_boolean_key_and_submission(self):
        """Booleans on either side are compared as labels."""
        q = {"type": "True/False", "question": "?", "correctAnswer": True}
        assert grade(q, True) == {"is_correct": True, "partial_credit": 3}
        assert grade(q, "False")["is_correct"] is False


class TestFillInBlank:
    """Fill-in-blank grading with alternatives."""

    def test_alternative_is_accepted_case_insensitively(self):
        """'COLOR' matches the 'colour|color' key."""
        q = {"type": "Fill in the blanks", "question": "?", "answer": "colour|color"}
        assert grade(q, " COLOR ")["is_correct"] is True

    def test_case_sensitive_flag(self):
        """caseSensitive=True requires exact case."""
        q = {"type": "Fill in the blanks", "question": "?", "answer": "NaCl",
             "caseSensitive": True}
        assert grade(q, "nacl")["is_correct"] is False
        assert grade(q, "NaCl")["is_correct"] is True

    def test_no_accepted_answers_grades_zero(self, caplog):
        """An empty key is an inconsistency, not an exception."""
        q = {"type": "Fill in the blanks", "question": "?", "answer": " | "}
        with caplog.at_level(logging.WARNING, logger="quiz_battle.grading"):
            assert grade(q, "") == {"is_correct": False, "partial_credit": 0}
        assert "no accepted answers" in caplog.text


class TestMatching:
    """Matching questions routed through the grader."""

    def test_full_match_is_correct(self):
        """Every pair right earns full points."""
        pairs = [(f"L{n}", f"R{n}") for n in range(5)]
        result = grade(_matching("hard"), pairs)
        assert result == {"is_correct": True, "partial_credit": 5, "accuracy": 1.0}

    def test_four_of_five_on_medium(self):
        """Accuracy 0.8 on a medium question rounds 2.4 to 2."""
        pairs = [(f"L{n}", f"R{n}") for n in range(4)] + [("L4", "wrong")]
        result = grade(_matching(), pairs)
        assert result["accuracy"] == pytest.approx(0.8)
        assert result["partial_credit"] == 2
        assert result["is_correct"] is False

    def test_mapping_submission(self):
        """A {left: right} mapping is a valid pair collection."""
        result = grade(_matching(pairs=2), {"L0": "R0", "L1": "R1"})
        assert result["is_correct"] is True

    def test_empty_submission_has_zero_accuracy(self):
        """No pairs submitted means nothing matched."""
        assert grade(_matching(), []) == {"is_correct": False, "partial_credit": 0, "accuracy": 0.0}

    def test_non_collection_submission(self):
        """A bare string is not a pair collection."""
        assert grade(_matching(), "L0=R0")["partial_credit"] == 0


class TestMalformedInput:
    """Grading never raises."""

    @pytest.mark.parametrize("question", [
        None,
        "not a question",
        {"type": "Essay", "question": "?"},
        {"type": "Multiple Choice", "question": "?", "choices": ["A"]},
        {"type": "Matching", "question": "?", "matchingPairs": []},
    ])
    def test_bad_questions_grade_zero(self, question):
        """Malformed keys and unknown types produce zero credit."""
        result = grade(question, "A")
        assert result["is_correct"] is False
        assert result["partial_credit"] == 0

    def test_wrong_submission_shape(self):
        """A list submitted to a multiple choice question is just wrong."""
        q = {"type": "Multiple Choice", "question": "?", "choices": ["A", "B"],
             "correctAnswer": "A"}
        assert grade(q, ["A"])["is_correct"] is False

    def test_inconsistency_is_logged(self, caplog):
        """Unknown type is logged as a warning."""
        with caplog.at_level(logging.WARNING, logger="quiz_battle.grading"):
            grade({"id": 12, "type": "Essay"}, "x")
        assert "unknown question type" in caplog.text
