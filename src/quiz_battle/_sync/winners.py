# Area: Sync
"""
quiz_battle._sync.winners — Winner, reward and leaderboard computation
======================================================================

Pure functions shared by the host's sync, the results reader and the
client-side fallback result. Winners are everyone holding the top
score; there is no secondary tie-break.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple

from .._battle.models import Battle, BattleResult, Participant, ParticipantResult
from ..types import LeaderboardRow, ResultsView


def compute_winners(scores: Dict[str, int]) -> Tuple[List[str], bool]:
    """
    Return (winner_ids, is_tie) for a score map.

    An empty map has no winners. Winner ids keep the map's order.
    """
    if not scores:
        return [], False
    top = max(scores.values())
    winners = [user_id for user_id, score in scores.items() if score == top]
    return winners, len(winners) > 1


def compute_rewards(
    winner_ids: Sequence[str], points: int, exp: int
) -> Dict[str, Dict[str, int]]:
    """Rewards per winner. Non-winners get nothing on this path."""
    return {user_id: {"points": points, "exp": exp} for user_id in winner_ids}


def build_result(
    join_code: str,
    participants: Sequence[Participant],
    scores: Dict[str, int],
    points: int,
    exp: int,
    forfeited: Sequence[str] = (),
    quiz_title: Optional[str] = None,
) -> BattleResult:
    """
    Build a BattleResult from durable participants and final scores.

    Scores missing from ``scores`` fall back to the participant row.
    """
    final = {p.user_id: int(scores.get(p.user_id, p.score)) for p in participants}
    winner_ids, is_tie = compute_winners(final)
    rewards = compute_rewards(winner_ids, points, exp)
    gone = set(forfeited)
    rows = [
        ParticipantResult(
            user_id=p.user_id,
            display_name=p.display_name,
            score=final[p.user_id],
            is_winner=p.user_id in rewards,
            points_earned=rewards.get(p.user_id, {}).get("points", 0),
            exp_earned=rewards.get(p.user_id, {}).get("exp", 0),
            forfeited=p.forfeited or p.user_id in gone,
        )
        for p in participants
    ]
    return BattleResult(
        join_code=join_code,
        participants=rows,
        winner_ids=winner_ids,
        is_tie=is_tie,
        quiz_title=quiz_title,
    )


def leaderboard_rows(results: Sequence[ParticipantResult]) -> List[LeaderboardRow]:
    """Rank by score, highest first. Equal scores share a rank (1, 1, 3)."""
    ordered = sorted(results, key=lambda r: -r.score)
    rows: List[LeaderboardRow] = []
    rank = 0
    previous = None
    for position, r in enumerate(ordered, start=1):
        if r.score != previous:
            rank = position
            previous = r.score
        rows.append(LeaderboardRow(
            rank=rank,
            user_id=r.user_id,
            display_name=r.display_name,
            score=r.score,
            is_winner=r.is_winner,
            points_earned=r.points_earned,
            exp_earned=r.exp_earned,
            forfeited=r.forfeited,
        ))
    return rows


def to_view(result: BattleResult, source: str) -> ResultsView:
    return ResultsView(
        join_code=result.join_code,
        is_tie=result.is_tie,
        rows=leaderboard_rows(result.participants),
        source=source,
        quiz_title=result.quiz_title,
    )


def result_from_store(battle: Battle, participants: Sequence[Participant]) -> BattleResult:
    """BattleResult as recorded by a finished sync in the durable store."""
    return BattleResult(
        join_code=battle.join_code,
        participants=[
            ParticipantResult(
                user_id=p.user_id,
                display_name=p.display_name,
                score=p.score,
                is_winner=p.is_winner,
                points_earned=p.points_earned,
                exp_earned=p.exp_earned,
                forfeited=p.forfeited,
            )
            for p in participants
        ],
        winner_ids=list(battle.winner_ids),
        is_tie=battle.is_tie,
        quiz_title=battle.quiz_title,
    )
