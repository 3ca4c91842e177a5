# Area: Selection
"""
Question selection for battles.

This package handles:
- Structural validation of question payloads
- The normal, casual and adaptive selection policies
- Count clamping and adaptive-mode eligibility for callers
"""

from .validator import validate_question, is_valid_question
from .selector import (
    SelectionMode,
    SelectionReport,
    ADAPTIVE_PRIORITY,
    select_questions,
    selection_report,
    filter_valid,
    bucket_by_difficulty,
)
from .eligibility import clamp_count, is_adaptive_eligible

__all__ = [
    "validate_question",
    "is_valid_question",
    "SelectionMode",
    "SelectionReport",
    "ADAPTIVE_PRIORITY",
    "select_questions",
    "selection_report",
    "filter_valid",
    "bucket_by_difficulty",
    "clamp_count",
    "is_adaptive_eligible",
]
