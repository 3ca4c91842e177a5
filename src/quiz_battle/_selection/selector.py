# Area: Selection
"""
quiz_battle._selection.selector — Question selection policies
==============================================================

Builds the ordered question list for a battle from a quiz's pool.

Modes:
    normal   — keep pool order, take the first N
    casual   — uniform shuffle, take the first N
    adaptive — fill from difficulty buckets in the order
               medium -> easy -> hard, keeping pool order inside
               each bucket

Structurally invalid questions are dropped (and logged) before any
mode runs. The selector never clamps ``requested_count``; callers do
that with ``clamp_count`` first.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from .._shared.questions import Difficulty, parse_difficulty
from .validator import validate_question

logger = logging.getLogger("quiz_battle.selection")

# Bucket fill order for adaptive mode
ADAPTIVE_PRIORITY = (Difficulty.MEDIUM, Difficulty.EASY, Difficulty.HARD)


class SelectionMode(Enum):
    """Question selection policy."""
    NORMAL = "normal"
    CASUAL = "casual"
    ADAPTIVE = "adaptive"


@dataclass
class SelectionReport:
    """
    Summary of a pool after invalid questions were dropped.

    Attributes:
        total: Questions in the raw pool
        valid: Questions that passed validation
        rejected: Index -> errors for each dropped question
        buckets: Difficulty value -> count among valid questions
    """

    total: int
    valid: int
    rejected: Dict[int, List[str]] = field(default_factory=dict)
    buckets: Dict[str, int] = field(default_factory=dict)

    @property
    def shrunk(self) -> bool:
        return self.valid < self.total


def filter_valid(pool: Sequence[Any]) -> List[Dict[str, Any]]:
    """Return the valid questions in pool order, logging each rejection."""
    valid: List[Dict[str, Any]] = []
    for index, question in enumerate(pool):
        errors = validate_question(question, index)
        if errors:
            logger.warning(
                "Dropping invalid question at index %d: %s", index, "; ".join(errors),
                extra={"question_index": index, "errors": errors},
            )
            continue
        valid.append(question)
    return valid


def bucket_by_difficulty(questions: Sequence[Dict[str, Any]]) -> Dict[Difficulty, List[Dict[str, Any]]]:
    """Partition questions by difficulty, preserving order. Ungraded -> medium."""
    buckets: Dict[Difficulty, List[Dict[str, Any]]] = {d: [] for d in Difficulty}
    for question in questions:
        buckets[parse_difficulty(question.get("difficulty"))].append(question)
    return buckets


def selection_report(pool: Sequence[Any]) -> SelectionReport:
    """Describe how much of the pool is usable and how it splits by difficulty."""
    rejected: Dict[int, List[str]] = {}
    valid: List[Dict[str, Any]] = []
    for index, question in enumerate(pool):
        errors = validate_question(question, index)
        if errors:
            rejected[index] = errors
        else:
            valid.append(question)
    buckets = bucket_by_difficulty(valid)
    return SelectionReport(
        total=len(pool),
        valid=len(valid),
        rejected=rejected,
        buckets={d.value: len(items) for d, items in buckets.items()},
    )


def _select_adaptive(questions: List[Dict[str, Any]], count: int) -> List[Dict[str, Any]]:
    buckets = bucket_by_difficulty(questions)
    selected: List[Dict[str, Any]] = []
    for difficulty in ADAPTIVE_PRIORITY:
        need = count - len(selected)
        if need <= 0:
            break
        selected.extend(buckets[difficulty][:need])
    return selected


def select_questions(
    pool: Sequence[Any],
    mode: Union[SelectionMode, str] = SelectionMode.NORMAL,
    requested_count: int = 0,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """
    Select and order questions for a battle.

    Args:
        pool: Raw question pool from the quiz store
        mode: SelectionMode or its string value
        requested_count: How many questions to return (already clamped)
        rng: Random source for casual mode (defaults to module random)

    Returns:
        Up to ``requested_count`` valid questions. Never raises; an
        unknown mode is logged and treated as normal.
    """
    try:
        mode = SelectionMode(mode)
    except ValueError:
        logger.warning("Unknown selection mode %r, using normal", mode)
        mode = SelectionMode.NORMAL

    questions = filter_valid(pool)
    count = max(0, int(requested_count))

    if mode is SelectionMode.CASUAL:
        shuffled = list(questions)
        (rng or random).shuffle(shuffled)
        selected = shuffled[:count]
    elif mode is SelectionMode.ADAPTIVE:
        selected = _select_adaptive(questions, count)
    else:
        selected = questions[:count]

    logger.info(
        "Selected %d/%d questions (mode=%s, pool=%d, valid=%d)",
        len(selected), count, mode.value, len(pool), len(questions),
    )
    return selected
