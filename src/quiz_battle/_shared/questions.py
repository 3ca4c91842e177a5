# Area: Shared
"""
quiz_battle._shared.questions — Question type and field helpers
===============================================================

Normalizes the question payload shapes produced by the quiz store.
Payloads use camelCase keys; snake_case aliases are accepted so that
rows read back from the SQL side work unchanged.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional


class QuestionType(Enum):
    """The four supported question types."""
    MULTIPLE_CHOICE = "Multiple Choice"
    TRUE_FALSE = "True/False"
    FILL_IN_BLANK = "Fill in the blanks"
    MATCHING = "Matching"


class Difficulty(Enum):
    """Question difficulty. Unknown or missing values read as MEDIUM."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_POINTS = {
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 3,
    Difficulty.HARD: 5,
}

_TYPE_ALIASES = {
    "multiple choice": QuestionType.MULTIPLE_CHOICE,
    "multiple_choice": QuestionType.MULTIPLE_CHOICE,
    "true/false": QuestionType.TRUE_FALSE,
    "true_false": QuestionType.TRUE_FALSE,
    "fill in the blanks": QuestionType.FILL_IN_BLANK,
    "fill_in_blank": QuestionType.FILL_IN_BLANK,
    "fill_in_blanks": QuestionType.FILL_IN_BLANK,
    "matching": QuestionType.MATCHING,
}

# camelCase key -> snake_case alias
_FIELD_ALIASES = {
    "correctAnswer": "correct_answer",
    "alternativeAnswers": "alternative_answers",
    "caseSensitive": "case_sensitive",
    "matchingPairs": "matching_pairs",
}

# Separator used by the quiz editor to pack alternatives into `answer`
ALTERNATIVE_SEPARATOR = "|"


def parse_question_type(raw: Any) -> Optional[QuestionType]:
    """Map a type label to QuestionType, or None if unrecognized."""
    if isinstance(raw, QuestionType):
        return raw
    if not isinstance(raw, str):
        return None
    return _TYPE_ALIASES.get(raw.strip().lower())


def parse_difficulty(raw: Any) -> Difficulty:
    """Map a difficulty label to Difficulty, defaulting to MEDIUM."""
    if isinstance(raw, Difficulty):
        return raw
    if isinstance(raw, str):
        try:
            return Difficulty(raw.strip().lower())
        except ValueError:
            pass
    return Difficulty.MEDIUM


def difficulty_points(raw: Any) -> int:
    """Points for a fully correct answer: easy=1, medium=3, hard=5."""
    return DIFFICULTY_POINTS[parse_difficulty(raw)]


def get_field(question: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Read a question field by its camelCase name, falling back to snake_case."""
    if key in question:
        return question[key]
    alias = _FIELD_ALIASES.get(key)
    if alias and alias in question:
        return question[alias]
    return default


def prompt_text(question: Dict[str, Any]) -> str:
    """Question prompt, or empty string when missing or not text."""
    text = question.get("question", question.get("prompt"))
    return text.strip() if isinstance(text, str) else ""


def split_alternatives(raw: Any) -> List[str]:
    """Split a packed answer string into trimmed, non-empty alternatives."""
    if not isinstance(raw, str):
        return []
    return [part.strip() for part in raw.split(ALTERNATIVE_SEPARATOR) if part.strip()]
