# Area: Grading
"""
quiz_battle._grading.attempt — Whole-run grading for solo attempts
==================================================================

Grades a full list of answers, producing the summary shown on the
solo results screen and the payload for the quiz store's
submit-attempt call.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .._shared.questions import difficulty_points
from ..types import AttemptAnswer, AttemptPayload
from .grader import grade

# Grade band thresholds (percent)
GRADE_OUTSTANDING = 90
GRADE_EXCELLENT = 80
GRADE_GOOD = 70
GRADE_PASSING = 60


@dataclass
class AttemptSummary:
    """
    Graded result of one complete solo run.

    Attributes:
        score: Sum of partial credit over all questions
        max_score: Sum of difficulty points over all questions
        correct_count: Number of fully correct answers
        total_questions: Number of questions in the run
        answers: Per-question grading detail
    """

    score: int
    max_score: int
    correct_count: int
    total_questions: int
    answers: List[AttemptAnswer] = field(default_factory=list)

    @property
    def percentage(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return 100.0 * self.correct_count / self.total_questions

    def to_payload(self, time_spent_seconds: int) -> AttemptPayload:
        return {
            "score": self.score,
            "totalQuestions": self.total_questions,
            "timeSpent": int(time_spent_seconds),
            "answers": list(self.answers),
        }


def grade_attempt(questions: Sequence[Dict[str, Any]], answers: Sequence[Any]) -> AttemptSummary:
    """
    Grade answers position by position.

    Missing trailing answers (player ran out of time) grade as wrong.
    """
    graded: List[AttemptAnswer] = []
    score = correct = max_score = 0
    for index, question in enumerate(questions):
        submitted = answers[index] if index < len(answers) else None
        result = grade(question, submitted)
        score += result["partial_credit"]
        correct += 1 if result["is_correct"] else 0
        if isinstance(question, dict):
            max_score += difficulty_points(question.get("difficulty"))
        graded.append({
            "question_index": index,
            "submitted": submitted,
            "is_correct": result["is_correct"],
            "partial_credit": result["partial_credit"],
        })

    return AttemptSummary(
        score=score,
        max_score=max_score,
        correct_count=correct,
        total_questions=len(questions),
        answers=graded,
    )


def performance_band(percentage: float) -> str:
    """Grade band label for a percentage score."""
    if percentage >= GRADE_OUTSTANDING:
        return "outstanding"
    if percentage >= GRADE_EXCELLENT:
        return "excellent"
    if percentage >= GRADE_GOOD:
        return "good"
    if percentage >= GRADE_PASSING:
        return "passing"
    return "keep_practicing"
