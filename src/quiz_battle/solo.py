# Area: Grading
"""
quiz_battle.solo — Solo quiz attempts
=====================================

Grades a finished solo run and submits it to the quiz store.

Usage:
    outcome = submit_solo_attempt(sink, quiz_id, questions, answers, time_spent_seconds=95)
    print(outcome.summary.score, outcome.band, outcome.points_earned)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from ._battle.stores import AttemptSink
from ._grading import AttemptSummary, grade_attempt, performance_band

logger = logging.getLogger("quiz_battle.solo")


@dataclass
class SoloOutcome:
    """Graded solo run plus what the quiz store awarded for it."""

    summary: AttemptSummary
    band: str
    points_earned: int
    exp_earned: int


def submit_solo_attempt(
    sink: AttemptSink,
    quiz_id: int,
    questions: Sequence[Dict[str, Any]],
    answers: Sequence[Any],
    time_spent_seconds: int = 0,
) -> SoloOutcome:
    """Grade ``answers`` against ``questions`` and submit the attempt."""
    summary = grade_attempt(questions, answers)
    awarded = sink.submit_attempt(quiz_id, dict(summary.to_payload(time_spent_seconds)))
    logger.info(
        f"Solo attempt on quiz {quiz_id}: {summary.correct_count}/{summary.total_questions} "
        f"correct, score {summary.score}"
    )
    return SoloOutcome(
        summary=summary,
        band=performance_band(summary.percentage),
        points_earned=int(awarded.get("pointsEarned", 0)),
        exp_earned=int(awarded.get("expEarned", 0)),
    )
