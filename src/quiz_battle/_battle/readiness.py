# Area: Battle
"""
quiz_battle._battle.readiness — Lobby readiness aggregation
===========================================================

Pure reducers over a full presence snapshot. Readiness and completion
are recomputed from the snapshot on every call; nothing is counted
incrementally.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Readiness:
    """Aggregate readiness of a lobby."""

    player_count: int
    ready_count: int
    not_ready: List[str] = field(default_factory=list)

    @property
    def all_ready(self) -> bool:
        return self.player_count > 0 and self.ready_count == self.player_count

    def missing_players(self, min_players: int) -> int:
        return max(0, min_players - self.player_count)


def _players(snapshot: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not isinstance(snapshot, dict):
        return []
    players = []
    for user_id, record in snapshot.items():
        if not isinstance(record, dict):
            continue
        if record.get("is_viewer"):
            continue
        players.append(dict(record, user_id=record.get("user_id", user_id)))
    return players


def aggregate_readiness(snapshot: Optional[Dict[str, Any]]) -> Readiness:
    """
    Reduce a ``players`` snapshot to a Readiness.

    Viewers and malformed records are ignored. Order of the snapshot
    does not affect the result.
    """
    players = _players(snapshot)
    not_ready = sorted(p["user_id"] for p in players if not p.get("is_ready"))
    return Readiness(
        player_count=len(players),
        ready_count=len(players) - len(not_ready),
        not_ready=not_ready,
    )


def all_finished(snapshot: Optional[Dict[str, Any]], total_questions: int) -> bool:
    """
    True when every player has finished or forfeited.

    A player has finished once ``finished`` is set or their question
    cursor reached ``total_questions``.
    """
    players = _players(snapshot)
    if not players:
        return False
    for p in players:
        if p.get("forfeited") or p.get("finished"):
            continue
        if int(p.get("current_question") or 0) >= total_questions:
            continue
        return False
    return True


def scores_from_snapshot(snapshot: Optional[Dict[str, Any]]) -> Dict[str, int]:
    return {p["user_id"]: int(p.get("score") or 0) for p in _players(snapshot)}
