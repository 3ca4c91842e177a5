# Area: Selection
"""
quiz_battle._selection.validator_schemas — Answer key schemas
==============================================================

Per-type schema definitions for structural question validation.
Keys are camelCase; the validator resolves snake_case aliases.
"""

from __future__ import annotations
from typing import Any, Dict

from .._shared.questions import QuestionType


# ══════════════════════════════════════════════════════════════
# ANSWER KEY SCHEMAS
# ══════════════════════════════════════════════════════════════

ANSWER_KEY_SCHEMAS: Dict[QuestionType, Dict[str, Any]] = {
    QuestionType.MULTIPLE_CHOICE: {
        "required": ["choices", "correctAnswer"],
        "types": {"choices": list, "correctAnswer": str},
        "constraints": {
            "choices": {"min_length": 2},
            "correctAnswer": {"non_blank": True, "member_of": "choices"},
        },
    },
    QuestionType.TRUE_FALSE: {
        "required": ["correctAnswer"],
        "types": {"correctAnswer": (str, bool)},
        "constraints": {
            "correctAnswer": {"one_of": ["True", "False", True, False]},
        },
    },
    QuestionType.FILL_IN_BLANK: {
        "required": ["answer"],
        "types": {"answer": str},
        "constraints": {
            "answer": {"non_blank": True},
        },
    },
    QuestionType.MATCHING: {
        "required": ["matchingPairs"],
        "types": {"matchingPairs": list},
        "constraints": {
            "matchingPairs": {"min_length": 1},
        },
        "list_item_schema": {
            "matchingPairs": {
                "required": ["left", "right"],
                "types": {"left": str, "right": str},
                "constraints": {
                    "left": {"non_blank": True},
                    "right": {"non_blank": True},
                },
            },
        },
    },
}
