# Area: Grading
"""
quiz_battle._grading.grader — Answer grading
=============================================

Grades one submitted answer against a question's answer key.

Grading never raises. A missing or malformed answer key, an unknown
question type or a submission of the wrong shape all produce a
zero-credit result and a logged inconsistency, so one bad question
cannot abort a battle.
"""

from __future__ import annotations
import logging
from typing import Any, Dict

from .._shared.questions import (
    QuestionType,
    difficulty_points,
    get_field,
    parse_question_type,
)
from ..types import GradeResult
from .fill_blank import accepted_answers, matches_fill_blank
from .matching import normalize_pairs, score_matching

logger = logging.getLogger("quiz_battle.grading")


def _no_credit() -> GradeResult:
    return {"is_correct": False, "partial_credit": 0}


def _inconsistent(question: Any, reason: str) -> GradeResult:
    qid = question.get("id") if isinstance(question, dict) else None
    logger.warning(
        "Grading inconsistency (question %s): %s", qid, reason,
        extra={"question_id": qid, "reason": reason},
    )
    return _no_credit()


def _grade_exact(question: Dict[str, Any], submitted: Any, points: int) -> GradeResult:
    key = get_field(question, "correctAnswer")
    if not isinstance(key, str) or not key.strip():
        return _inconsistent(question, "missing correctAnswer")
    if not isinstance(submitted, str):
        return _no_credit()
    if submitted.strip() == key.strip():
        return {"is_correct": True, "partial_credit": points}
    return _no_credit()


def _grade_true_false(question: Dict[str, Any], submitted: Any, points: int) -> GradeResult:
    # Stored keys are sometimes booleans; compare on the "True"/"False" labels.
    key = get_field(question, "correctAnswer")
    if isinstance(key, bool):
        question = dict(question, correctAnswer="True" if key else "False")
    if isinstance(submitted, bool):
        submitted = "True" if submitted else "False"
    return _grade_exact(question, submitted, points)


def _grade_fill_blank(question: Dict[str, Any], submitted: Any, points: int) -> GradeResult:
    if not accepted_answers(question):
        return _inconsistent(question, "fill-in-blank has no accepted answers")
    if not isinstance(submitted, str):
        return _no_credit()
    if matches_fill_blank(question, submitted):
        return {"is_correct": True, "partial_credit": points}
    return _no_credit()


def _grade_matching(question: Dict[str, Any], submitted: Any, points: int) -> GradeResult:
    key = normalize_pairs(get_field(question, "matchingPairs"))
    if not key:
        return _inconsistent(question, "matching question has no pairs")
    submission = normalize_pairs(submitted)
    if not submission:
        return {"is_correct": False, "partial_credit": 0, "accuracy": 0.0}
    return score_matching(key, submission, points)


_GRADERS = {
    QuestionType.MULTIPLE_CHOICE: _grade_exact,
    QuestionType.TRUE_FALSE: _grade_true_false,
    QuestionType.FILL_IN_BLANK: _grade_fill_blank,
    QuestionType.MATCHING: _grade_matching,
}


def grade(question: Dict[str, Any], submitted: Any) -> GradeResult:
    """
    Grade a submitted answer.

    Args:
        question: Question payload (see QuestionPayload)
        submitted: Choice text, "True"/"False", fill-in text, or a
            collection of matching pairs

    Returns:
        GradeResult with is_correct, partial_credit and, for
        matching questions, accuracy
    """
    if not isinstance(question, dict):
        return _inconsistent(question, f"question is {type(question).__name__}, not dict")

    qtype = parse_question_type(question.get("type"))
    if qtype is None:
        return _inconsistent(question, f"unknown question type {question.get('type')!r}")

    points = difficulty_points(question.get("difficulty"))
    try:
        return _GRADERS[qtype](question, submitted, points)
    except (TypeError, ValueError, AttributeError) as e:
        return _inconsistent(question, f"grader error: {e}")


def check_answer(question: Dict[str, Any], submitted: Any) -> bool:
    """Shorthand for ``grade(...)["is_correct"]``."""
    return grade(question, submitted)["is_correct"]
