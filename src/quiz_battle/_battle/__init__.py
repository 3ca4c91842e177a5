# Area: Battle
"""
Battle lifecycle.

This package handles:
- Battle status transitions and the records kept in both stores
- Store and collaborator interfaces
- Readiness aggregation, client session state and action ordering
- Lobby expiry, abandoned battle cleanup and the live lobby view

The orchestrator itself lives in ``quiz_battle._battle.orchestrator``.
"""

from .enums import BattleStatus, BattleEvent
from .state_machine import BattleStateMachine, TRANSITIONS, next_status
from .models import (
    Battle,
    Participant,
    PresenceRecord,
    AnswerSubmission,
    BattleResult,
    ParticipantResult,
)
from .stores import DurableBattleStore, PresenceStore, QuizSource, AttemptSink
from .readiness import Readiness, aggregate_readiness, all_finished
from .session import ClientSession, ClientView
from .action_queue import ActionQueue, ActionOutcome
from .join_code import generate_join_code
from .lobby_timer import DeadlineTracker
from .cleanup import BattleCleaner
from .view import LobbyView

__all__ = [
    "BattleStatus",
    "BattleEvent",
    "BattleStateMachine",
    "TRANSITIONS",
    "next_status",
    "Battle",
    "Participant",
    "PresenceRecord",
    "AnswerSubmission",
    "BattleResult",
    "ParticipantResult",
    "DurableBattleStore",
    "PresenceStore",
    "QuizSource",
    "AttemptSink",
    "Readiness",
    "aggregate_readiness",
    "all_finished",
    "ClientSession",
    "ClientView",
    "ActionQueue",
    "ActionOutcome",
    "generate_join_code",
    "DeadlineTracker",
    "BattleCleaner",
    "LobbyView",
]
