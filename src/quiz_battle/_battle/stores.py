# Area: Battle
"""
quiz_battle._battle.stores — Store and collaborator interfaces
==============================================================

Narrow repository interfaces the battle engine depends on:

- DurableBattleStore: store of record for battles, participants and
  final scores.
- PresenceStore: path-addressed, subscribe-on-change record store used
  only while a battle is live.
- QuizSource: read access to quizzes and their questions.
- AttemptSink: receives solo attempt submissions.

Implementations live in ``quiz_battle._storage``.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .enums import BattleStatus
from .models import Battle, Participant

Unsubscribe = Callable[[], None]
Listener = Callable[[Any], None]


# ── Ephemeral store paths ────────────────────────────────────

def battle_path(join_code: str) -> str:
    return f"battles/{join_code}"


def metadata_path(join_code: str) -> str:
    return f"battles/{join_code}/metadata"


def players_path(join_code: str) -> str:
    return f"battles/{join_code}/players"


def player_path(join_code: str, user_id: str) -> str:
    return f"battles/{join_code}/players/{user_id}"


def questions_path(join_code: str) -> str:
    return f"battles/{join_code}/questions"


def all_answers_path(join_code: str) -> str:
    return f"battles/{join_code}/answers"


def answers_path(join_code: str, user_id: str) -> str:
    return f"battles/{join_code}/answers/{user_id}"


def answer_path(join_code: str, user_id: str, question_index: int) -> str:
    return f"battles/{join_code}/answers/{user_id}/{question_index}"


def viewers_path(join_code: str) -> str:
    return f"battles/{join_code}/viewers"


class DurableBattleStore(ABC):
    """
    Store of record for battles and participants.

    Guards that must hold under concurrency (join cap, start
    preconditions, idempotent finalization) are enforced inside the
    store's own write, and rejections are raised as BattleError.
    """

    @abstractmethod
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
        """Create a waiting battle with the host as first participant."""

    @abstractmethod
    def get_battle(self, join_code: str) -> Optional[Battle]:
        """Return the battle for a join code, or None."""

    @abstractmethod
    def add_participant(
        self, join_code: str, user_id: str, display_name: str, avatar: Optional[str] = None
    ) -> Participant:
        """
        Add a participant to a waiting battle.

        Raises:
            BattleError: NOT_FOUND, INVALID_STATUS or TOO_MANY_PLAYERS
        """

    @abstractmethod
    def remove_participant(self, join_code: str, user_id: str) -> None:
        """Delete a participant row (waiting battles only)."""

    @abstractmethod
    def list_participants(self, join_code: str) -> List[Participant]:
        """Participants in join order."""

    @abstractmethod
    def start_battle(
        self, join_code: str, caller_id: str, expected_participants: int,
        min_players: int, total_questions: int,
    ) -> Battle:
        """
        Flip a waiting battle to in_progress.

        Raises:
            BattleError: NOT_FOUND, NOT_HOST, INVALID_STATUS or
                NOT_ENOUGH_PLAYERS (including when the participant count
                differs from ``expected_participants``)
        """

    @abstractmethod
    def update_score(self, join_code: str, user_id: str, score: int) -> None:
        """Write a participant's own running score."""

    @abstractmethod
    def mark_forfeited(self, join_code: str, user_id: str) -> None:
        """Flag a participant as forfeited, keeping their score."""

    @abstractmethod
    def set_status(self, join_code: str, status: BattleStatus) -> Battle:
        """Force a status change (cancel/cleanup paths)."""

    @abstractmethod
    def finalize_results(
        self,
        join_code: str,
        scores: Dict[str, int],
        winner_ids: List[str],
        is_tie: bool,
        rewards: Dict[str, Dict[str, int]],
    ) -> bool:
        """
        Write final scores, winners and rewards and mark the battle
        completed and synced.

        Returns:
            True if this call wrote the results, False if the battle was
            already synced (no change made)
        """

    @abstractmethod
    def find_stale_battles(
        self, waiting_before: datetime, in_progress_before: datetime
    ) -> List[Battle]:
        """Active battles created/started before the given cutoffs."""

    @abstractmethod
    def active_join_codes(self) -> List[str]:
        """Join codes of battles that are waiting or in progress."""


class PresenceStore(ABC):
    """
    Path-addressed ephemeral record store.

    Values are plain JSON-like data. Subscribers receive the full
    snapshot at the subscribed path after every change at or below it.
    """

    @abstractmethod
    def get(self, path: str) -> Any:
        """Value at ``path`` (a copy), or None."""

    @abstractmethod
    def set(self, path: str, value: Any) -> None:
        """Replace the value at ``path``."""

    @abstractmethod
    def update(self, path: str, fields: Dict[str, Any]) -> None:
        """Merge ``fields`` into the dict at ``path`` (created if absent)."""

    @abstractmethod
    def remove(self, path: str) -> None:
        """Delete ``path`` and everything below it (no-op if absent)."""

    @abstractmethod
    def subscribe(self, path: str, callback: Listener) -> Unsubscribe:
        """Call ``callback(snapshot)`` now and on each change; returns an unsubscribe."""


class QuizSource(ABC):
    """Quiz CRUD collaborator (read side)."""

    @abstractmethod
    def get_quiz(self, quiz_id: int) -> Optional[Dict[str, Any]]:
        """Quiz dict with ``title`` and ``questions``, or None if deleted."""


class AttemptSink(ABC):
    """Receives solo attempt submissions."""

    @abstractmethod
    def submit_attempt(self, quiz_id: int, attempt: Dict[str, Any]) -> Dict[str, int]:
        """Record an attempt; returns ``{"pointsEarned": .., "expEarned": ..}``."""
