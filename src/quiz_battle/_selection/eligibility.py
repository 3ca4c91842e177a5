# Area: Selection
"""Caller-side checks run before handing a pool to the selector."""

from __future__ import annotations
from typing import Any, Sequence

from .._shared.questions import parse_difficulty
from .selector import filter_valid


def clamp_count(requested: int, available: int, minimum: int = 1, reserve: int = 0) -> int:
    """
    Clamp a requested question count to [minimum, available - reserve].

    When the upper bound falls below ``minimum`` the upper bound wins,
    so the result never exceeds what the pool can deliver.
    """
    upper = max(0, available - reserve)
    return max(0, min(max(requested, minimum), upper))


def is_adaptive_eligible(pool: Sequence[Any], min_pool_size: int = 5) -> bool:
    """
    Adaptive mode needs a mixed pool: at least two distinct difficulty
    levels among valid questions and at least ``min_pool_size`` of them.
    """
    valid = filter_valid(pool)
    if len(valid) < min_pool_size:
        return False
    levels = {parse_difficulty(q.get("difficulty")) for q in valid}
    return len(levels) >= 2
