# Area: Grading
"""
Answer grading for all four question types.

This package handles:
- Exact-match grading for multiple choice and true/false
- Fill-in-blank matching with alternatives and case policy
- Matching questions with partial credit
- Whole-run summaries for solo attempts
"""

from .grader import grade, check_answer
from .matching import PASS_THRESHOLD, matching_accuracy, round_half_up
from .attempt import AttemptSummary, grade_attempt, performance_band

__all__ = [
    "grade",
    "check_answer",
    "PASS_THRESHOLD",
    "matching_accuracy",
    "round_half_up",
    "AttemptSummary",
    "grade_attempt",
    "performance_band",
]
