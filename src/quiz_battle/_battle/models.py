# Area: Battle
"""
quiz_battle._battle.models — Battle data classes
================================================

Records shared between the orchestrator, the stores and the result
synchronizer. Durable records (Battle, Participant) mirror the rows
of the store of record; PresenceRecord and AnswerSubmission live only
in the ephemeral store and convert to and from plain dicts for it.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .enums import BattleStatus


@dataclass
class Battle:
    """
    Durable battle record.

    Attributes:
        battle_id: Store-assigned identifier
        join_code: 6-digit code players use to join
        quiz_id: Quiz the questions come from
        host_id: User id of the host
        status: Lifecycle status
        total_questions: Number of questions selected for the battle
        max_players: Participant cap, host included
        quiz_title: Quiz title for display
        is_tie: True when several participants share the top score
        winner_ids: All participants with the top score
    """

    battle_id: int
    join_code: str
    quiz_id: int
    host_id: str
    status: BattleStatus = BattleStatus.WAITING
    total_questions: int = 0
    max_players: int = 8
    quiz_title: Optional[str] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    synced_at: Optional[datetime] = None
    is_tie: bool = False
    winner_ids: List[str] = field(default_factory=list)

    @property
    def is_synced(self) -> bool:
        return self.status == BattleStatus.COMPLETED and self.synced_at is not None


@dataclass
class Participant:
    """Durable participant row."""

    user_id: str
    display_name: str
    avatar: Optional[str] = None
    score: int = 0
    is_host: bool = False
    is_winner: bool = False
    points_earned: int = 0
    exp_earned: int = 0
    forfeited: bool = False
    joined_at: Optional[datetime] = None

    @property
    def initial(self) -> str:
        return self.display_name[:1].upper() if self.display_name else "U"


@dataclass
class PresenceRecord:
    """
    Ephemeral per-player state under ``battles/{code}/players/{user_id}``.

    Losing one is tolerated: it can be rebuilt from the durable
    Participant row with ``from_participant``.
    """

    user_id: str
    display_name: str
    is_ready: bool = False
    joined_at: float = 0.0
    is_online: bool = True
    is_viewer: bool = False
    score: int = 0
    current_question: int = 0
    finished: bool = False
    forfeited: bool = False
    avatar: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PresenceRecord":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_participant(cls, participant: Participant, joined_at: float) -> "PresenceRecord":
        return cls(
            user_id=participant.user_id,
            display_name=participant.display_name,
            joined_at=joined_at,
            score=participant.score,
            forfeited=participant.forfeited,
            avatar=participant.avatar,
        )


@dataclass
class AnswerSubmission:
    """One graded answer under ``battles/{code}/answers/{user_id}/{index}``."""

    user_id: str
    question_index: int
    submitted: Any
    is_correct: bool
    partial_credit: int
    submitted_at: float = 0.0
    accuracy: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnswerSubmission":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class ParticipantResult:
    """Final standing of one participant."""

    user_id: str
    display_name: str
    score: int
    is_winner: bool = False
    points_earned: int = 0
    exp_earned: int = 0
    forfeited: bool = False


@dataclass
class BattleResult:
    """
    Final outcome of a battle.

    Built by the orchestrator when a battle completes and handed to the
    synchronizer; also kept by each client as the fallback shown when
    the durable store cannot be read.
    """

    join_code: str
    participants: List[ParticipantResult]
    winner_ids: List[str] = field(default_factory=list)
    is_tie: bool = False
    quiz_title: Optional[str] = None

    def score_of(self, user_id: str) -> Optional[int]:
        for p in self.participants:
            if p.user_id == user_id:
                return p.score
        return None

    def ranked(self) -> List[ParticipantResult]:
        """Participants by score, highest first (stable for equal scores)."""
        return sorted(self.participants, key=lambda p: -p.score)
