# Area: Grading
"""
quiz_battle._grading.matching — Matching question grading
=========================================================

Scores a list of submitted (left, right) pairs against the answer key.

Scoring bands (points = difficulty points for the question):
    accuracy < 0.60              -> 0
    0.60 <= accuracy < 1.0       -> max(1, round(accuracy * points))
    accuracy == 1.0, full length -> points, is_correct=True
"""

from __future__ import annotations
import logging
import math
from typing import Any, Iterable, List, Optional, Set, Tuple

logger = logging.getLogger("quiz_battle.grading.matching")

PASS_THRESHOLD = 0.60

Pair = Tuple[str, str]


def round_half_up(value: float) -> int:
    """Round to nearest int with .5 going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _coerce_pair(item: Any) -> Optional[Pair]:
    if isinstance(item, dict):
        left, right = item.get("left"), item.get("right")
    elif isinstance(item, (list, tuple)) and len(item) == 2:
        left, right = item
    else:
        return None
    if not isinstance(left, str) or not isinstance(right, str):
        return None
    return left.strip(), right.strip()


def normalize_pairs(raw: Any) -> Optional[List[Pair]]:
    """
    Turn a pair collection into a list of trimmed (left, right) tuples.

    Accepts a list of {"left", "right"} dicts, a list of 2-item
    sequences, or a {left: right} mapping. Returns None when the
    collection is not a pair collection at all; malformed items
    inside a valid collection are dropped.
    """
    if isinstance(raw, dict):
        items: Iterable[Any] = list(raw.items())
    elif isinstance(raw, (list, tuple)):
        items = raw
    else:
        return None

    pairs: List[Pair] = []
    for item in items:
        pair = _coerce_pair(item)
        if pair is not None:
            pairs.append(pair)
    return pairs


def matching_accuracy(key: List[Pair], submission: List[Pair]) -> float:
    """Fraction of key pairs reproduced exactly by the submission."""
    if not key:
        return 0.0
    key_set: Set[Pair] = set(key)
    correct = len(key_set & set(submission))
    return correct / len(key_set)


def score_matching(key: List[Pair], submission: List[Pair], points: int) -> dict:
    """
    Apply the matching scoring bands.

    Returns:
        Dict with is_correct, partial_credit and accuracy
    """
    accuracy = matching_accuracy(key, submission)
    key_size = len(set(key))
    submitted_size = len(set(submission))

    if accuracy >= 1.0 and len(submission) == len(key):
        return {"is_correct": True, "partial_credit": points, "accuracy": 1.0}

    # Extra pairs on top of a complete match dilute the score
    effective = accuracy
    if submitted_size > key_size:
        effective = accuracy * key_size / submitted_size

    if effective < PASS_THRESHOLD:
        credit = 0
    else:
        credit = min(points, max(1, round_half_up(effective * points)))

    logger.debug(
        "Matching graded: accuracy=%.2f effective=%.2f credit=%d",
        accuracy, effective, credit,
    )
    return {"is_correct": False, "partial_credit": credit, "accuracy": accuracy}
