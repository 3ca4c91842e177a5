# Area: Storage
"""
quiz_battle._storage.memory — In-memory store implementations
=============================================================

In-process implementations of the store and collaborator interfaces,
used by the demo CLI and the tests:

- InMemoryBattleStore: durable store with the same guards as SQLite
- InMemoryPresenceStore: path-addressed tree with subscribe-on-change
- InMemoryQuizSource / InMemoryAttemptSink: quiz collaborator stand-ins
"""

from __future__ import annotations
import copy
import itertools
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .._battle.enums import BattleStatus
from .._battle.models import Battle, Participant
from .._battle.stores import (
    AttemptSink,
    DurableBattleStore,
    Listener,
    PresenceStore,
    QuizSource,
    Unsubscribe,
)
from ..errors import BattleError, ErrorCode

logger = logging.getLogger("quiz_battle.storage.memory")

POINTS_PER_CORRECT = 10
EXP_PER_CORRECT = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryBattleStore(DurableBattleStore):
    """Durable store kept in dicts; one lock serializes every write."""

    def __init__(self, now: Callable[[], datetime] = _utcnow):
        self._now = now
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._battles: Dict[str, Battle] = {}
        self._participants: Dict[str, List[Participant]] = {}

    def _get(self, join_code: str) -> Battle:
        battle = self._battles.get(join_code)
        if battle is None:
            raise BattleError(ErrorCode.NOT_FOUND, join_code=join_code)
        return battle

    def _participant(self, join_code: str, user_id: str, operation: str) -> Participant:
        for p in self._participants.get(join_code, []):
            if p.user_id == user_id:
                return p
        raise BattleError(
            ErrorCode.NOT_PARTICIPANT, join_code=join_code,
            details={"operation": operation, "user_id": user_id},
        )

    def create_battle(
        self,
        quiz_id: int,
        host_id: str,
        host_name: str,
        join_code: str,
        total_questions: int,
        max_players: int,
        quiz_title: Optional[str] = None,
    ) -> Battle:
        with self._lock:
            now = self._now()
            battle = Battle(
                battle_id=next(self._ids),
                join_code=join_code,
                quiz_id=quiz_id,
                host_id=host_id,
                total_questions=total_questions,
                max_players=max_players,
                quiz_title=quiz_title,
                created_at=now,
            )
            self._battles[join_code] = battle
            self._participants[join_code] = [
                Participant(user_id=host_id, display_name=host_name, is_host=True, joined_at=now)
            ]
            return replace(battle)

    def get_battle(self, join_code: str) -> Optional[Battle]:
        with self._lock:
            battle = self._battles.get(join_code)
            return copy.deepcopy(battle) if battle else None

    def add_participant(
        self, join_code: str, user_id: str, display_name: str, avatar: Optional[str] = None
    ) -> Participant:
        with self._lock:
            battle = self._get(join_code)
            rows = self._participants[join_code]
            if battle.status != BattleStatus.WAITING:
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "join", "status": battle.status.value},
                )
            for p in rows:
                if p.user_id == user_id:
                    return replace(p)
            if len(rows) >= battle.max_players:
                raise BattleError(
                    ErrorCode.TOO_MANY_PLAYERS, join_code=join_code,
                    details={"operation": "join", "max_players": battle.max_players,
                             "player_count": len(rows)},
                )
            participant = Participant(
                user_id=user_id, display_name=display_name, avatar=avatar, joined_at=self._now()
            )
            rows.append(participant)
            return replace(participant)

    def remove_participant(self, join_code: str, user_id: str) -> None:
        with self._lock:
            battle = self._get(join_code)
            if battle.status != BattleStatus.WAITING:
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "leave", "status": battle.status.value},
                )
            self._participants[join_code] = [
                p for p in self._participants[join_code] if p.user_id != user_id
            ]

    def list_participants(self, join_code: str) -> List[Participant]:
        with self._lock:
            return [replace(p) for p in self._participants.get(join_code, [])]

    def start_battle(
        self, join_code: str, caller_id: str, expected_participants: int,
        min_players: int, total_questions: int,
    ) -> Battle:
        with self._lock:
            battle = self._get(join_code)
            if battle.host_id != caller_id:
                raise BattleError(
                    ErrorCode.NOT_HOST, join_code=join_code,
                    details={"operation": "start", "caller": caller_id},
                )
            if battle.status != BattleStatus.WAITING:
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "start", "status": battle.status.value},
                )
            count = len(self._participants[join_code])
            if count < min_players:
                raise BattleError(
                    ErrorCode.NOT_ENOUGH_PLAYERS, join_code=join_code,
                    details={"operation": "start", "min_players": min_players,
                             "player_count": count},
                )
            if count != expected_participants:
                raise BattleError(
                    ErrorCode.NOT_ENOUGH_PLAYERS,
                    "Players changed while starting",
                    join_code=join_code,
                    details={"operation": "start", "reason": "participants_changed",
                             "player_count": count, "expected": expected_participants},
                )
            battle.status = BattleStatus.IN_PROGRESS
            battle.started_at = self._now()
            battle.total_questions = total_questions
            return copy.deepcopy(battle)

    def update_score(self, join_code: str, user_id: str, score: int) -> None:
        with self._lock:
            self._participant(join_code, user_id, "update_score").score = score

    def mark_forfeited(self, join_code: str, user_id: str) -> None:
        with self._lock:
            self._participant(join_code, user_id, "mark_forfeited").forfeited = True

    def set_status(self, join_code: str, status: BattleStatus) -> Battle:
        with self._lock:
            battle = self._get(join_code)
            battle.status = status
            if status == BattleStatus.COMPLETED:
                battle.completed_at = self._now()
            return copy.deepcopy(battle)

    def finalize_results(
        self,
        join_code: str,
        scores: Dict[str, int],
        winner_ids: List[str],
        is_tie: bool,
        rewards: Dict[str, Dict[str, int]],
    ) -> bool:
        with self._lock:
            battle = self._get(join_code)
            if battle.synced_at is not None:
                return False
            if battle.status not in (BattleStatus.IN_PROGRESS, BattleStatus.COMPLETED):
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "sync", "status": battle.status.value},
                )
            winners = set(winner_ids)
            for p in self._participants[join_code]:
                if p.user_id not in scores:
                    continue
                reward = rewards.get(p.user_id, {})
                p.score = scores[p.user_id]
                p.is_winner = p.user_id in winners
                p.points_earned = reward.get("points", 0)
                p.exp_earned = reward.get("exp", 0)
            now = self._now()
            battle.status = BattleStatus.COMPLETED
            battle.is_tie = is_tie
            battle.winner_ids = [
                p.user_id for p in self._participants[join_code] if p.is_winner
            ]
            battle.completed_at = battle.completed_at or now
            battle.synced_at = now
            return True

    def find_stale_battles(
        self, waiting_before: datetime, in_progress_before: datetime
    ) -> List[Battle]:
        with self._lock:
            stale = []
            for battle in self._battles.values():
                if battle.status == BattleStatus.WAITING and battle.created_at < waiting_before:
                    stale.append(copy.deepcopy(battle))
                elif battle.status == BattleStatus.IN_PROGRESS and (
                    battle.started_at or battle.created_at
                ) < in_progress_before:
                    stale.append(copy.deepcopy(battle))
            return stale

    def active_join_codes(self) -> List[str]:
        with self._lock:
            return [code for code, b in self._battles.items() if b.status.is_active]


def _split(path: str) -> Tuple[str, ...]:
    return tuple(part for part in path.strip("/").split("/") if part)


def _related(a: Tuple[str, ...], b: Tuple[str, ...]) -> bool:
    """True if one path is an ancestor of (or equal to) the other."""
    n = min(len(a), len(b))
    return a[:n] == b[:n]


class InMemoryPresenceStore(PresenceStore):
    """
    Nested-dict presence store.

    Reads return deep copies. After each write every subscriber whose
    path is above, below or at the written path receives a fresh
    snapshot of its own path.
    """

    def __init__(self) -> None:
        self._root: Dict[str, Any] = {}
        self._lock = threading.RLock()
        self._subscribers: Dict[int, Tuple[Tuple[str, ...], Listener]] = {}
        self._sub_ids = itertools.count(1)

    def _read(self, parts: Tuple[str, ...]) -> Any:
        node: Any = self._root
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _parent(self, parts: Tuple[str, ...], create: bool) -> Optional[Dict[str, Any]]:
        node = self._root
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                if not create:
                    return None
                child = {}
                node[part] = child
            node = child
        return node

    def get(self, path: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._read(_split(path)))

    def set(self, path: str, value: Any) -> None:
        parts = _split(path)
        with self._lock:
            self._parent(parts, create=True)[parts[-1]] = copy.deepcopy(value)
        self._notify(parts)

    def update(self, path: str, fields: Dict[str, Any]) -> None:
        parts = _split(path)
        with self._lock:
            parent = self._parent(parts, create=True)
            current = parent.get(parts[-1])
            if not isinstance(current, dict):
                current = {}
                parent[parts[-1]] = current
            current.update(copy.deepcopy(fields))
        self._notify(parts)

    def remove(self, path: str) -> None:
        parts = _split(path)
        with self._lock:
            parent = self._parent(parts, create=False)
            if parent is None or parts[-1] not in parent:
                return
            del parent[parts[-1]]
        self._notify(parts)

    def subscribe(self, path: str, callback: Listener) -> Unsubscribe:
        parts = _split(path)
        sub_id = next(self._sub_ids)
        with self._lock:
            self._subscribers[sub_id] = (parts, callback)
        callback(self.get(path))

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(sub_id, None)

        return unsubscribe

    def _notify(self, changed: Tuple[str, ...]) -> None:
        with self._lock:
            targets = [
                (parts, cb) for parts, cb in self._subscribers.values()
                if _related(parts, changed)
            ]
        for parts, callback in targets:
            try:
                callback(copy.deepcopy(self._read(parts)))
            except Exception:
                logger.warning("Presence subscriber for %s failed", "/".join(parts), exc_info=True)


class InMemoryQuizSource(QuizSource):
    """Quizzes keyed by id; deleting one makes ``get_quiz`` return None."""

    def __init__(self, quizzes: Optional[Dict[int, Dict[str, Any]]] = None):
        self._quizzes: Dict[int, Dict[str, Any]] = dict(quizzes or {})

    def add_quiz(self, quiz_id: int, quiz: Dict[str, Any]) -> None:
        self._quizzes[quiz_id] = quiz

    def delete_quiz(self, quiz_id: int) -> None:
        self._quizzes.pop(quiz_id, None)

    def get_quiz(self, quiz_id: int) -> Optional[Dict[str, Any]]:
        quiz = self._quizzes.get(quiz_id)
        return copy.deepcopy(quiz) if quiz is not None else None


class InMemoryAttemptSink(AttemptSink):
    """Keeps submitted attempts; rewards 10 points and 5 exp per point scored."""

    def __init__(self) -> None:
        self.attempts: List[Tuple[int, Dict[str, Any]]] = []

    def submit_attempt(self, quiz_id: int, attempt: Dict[str, Any]) -> Dict[str, int]:
        self.attempts.append((quiz_id, copy.deepcopy(attempt)))
        score = int(attempt.get("score") or 0)
        return {
            "pointsEarned": score * POINTS_PER_CORRECT,
            "expEarned": score * EXP_PER_CORRECT,
        }
