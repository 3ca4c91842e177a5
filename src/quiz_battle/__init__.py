"""
quiz_battle — Quiz Battle Orchestration & Scoring Engine
========================================================

Drives live multiplayer quiz battles across a durable store of record
and an ephemeral presence store, and provides the pieces every client
needs around them: answer grading with partial credit, question
selection policies and the lobby avatar simulation.

Quick Start (in-memory stores):
    from quiz_battle import (
        BattleOrchestrator, ClientSession,
        InMemoryBattleStore, InMemoryPresenceStore, InMemoryQuizSource,
    )
    orchestrator = BattleOrchestrator(
        InMemoryBattleStore(), InMemoryPresenceStore(), InMemoryQuizSource(quizzes)
    )
    host = ClientSession(user_id="u1", display_name="Ana")
    orchestrator.create(host, quiz_id=1)

Grading only:
    from quiz_battle import grade
    grade(question, submitted)  # {"is_correct": ..., "partial_credit": ...}

Type Definitions
----------------
Payload shapes are available for import:

    from quiz_battle import QuestionPayload, GradeResult, ResultsView
"""

from ._grading import grade, grade_attempt, performance_band, AttemptSummary
from ._selection import (
    SelectionMode,
    select_questions,
    validate_question,
    clamp_count,
    is_adaptive_eligible,
    selection_report,
)
from ._lobby import Arena, Avatar, LobbyState, LobbySimulator, tick, spawn_avatar
from ._battle import (
    BattleStatus,
    BattleEvent,
    BattleStateMachine,
    Battle,
    Participant,
    PresenceRecord,
    AnswerSubmission,
    BattleResult,
    ParticipantResult,
    DurableBattleStore,
    PresenceStore,
    QuizSource,
    AttemptSink,
    Readiness,
    aggregate_readiness,
    ClientSession,
    ClientView,
    ActionQueue,
    ActionOutcome,
    BattleCleaner,
    LobbyView,
    generate_join_code,
)
from ._battle.orchestrator import BattleOrchestrator
from ._sync import ResultSynchronizer, ResultsReader, compute_winners
from ._storage import (
    SqliteBattleStore,
    InMemoryBattleStore,
    InMemoryPresenceStore,
    InMemoryQuizSource,
    InMemoryAttemptSink,
    init_database,
)
from ._shared import setup_logging
from .config import BattleConfig, load_config
from .errors import (
    ErrorCode,
    QuizBattleError,
    ConfigError,
    StoreError,
    BattleError,
    HalfAppliedTransitionError,
    SyncFailedError,
)
from .error_formatter import format_battle_error
from .solo import SoloOutcome, submit_solo_attempt
from .types import (
    MatchingPair,
    QuestionPayload,
    GradeResult,
    AttemptAnswer,
    AttemptPayload,
    LeaderboardRow,
    ResultsView,
)

__version__ = "1.0.0"

__all__ = [
    # Grading
    "grade",
    "grade_attempt",
    "performance_band",
    "AttemptSummary",
    "SoloOutcome",
    "submit_solo_attempt",
    # Selection
    "SelectionMode",
    "select_questions",
    "validate_question",
    "clamp_count",
    "is_adaptive_eligible",
    "selection_report",
    # Lobby
    "Arena",
    "Avatar",
    "LobbyState",
    "LobbySimulator",
    "tick",
    "spawn_avatar",
    # Battle
    "BattleOrchestrator",
    "BattleStatus",
    "BattleEvent",
    "BattleStateMachine",
    "Battle",
    "Participant",
    "PresenceRecord",
    "AnswerSubmission",
    "BattleResult",
    "ParticipantResult",
    "Readiness",
    "aggregate_readiness",
    "ClientSession",
    "ClientView",
    "ActionQueue",
    "ActionOutcome",
    "BattleCleaner",
    "LobbyView",
    "generate_join_code",
    # Sync
    "ResultSynchronizer",
    "ResultsReader",
    "compute_winners",
    # Stores
    "DurableBattleStore",
    "PresenceStore",
    "QuizSource",
    "AttemptSink",
    "SqliteBattleStore",
    "InMemoryBattleStore",
    "InMemoryPresenceStore",
    "InMemoryQuizSource",
    "InMemoryAttemptSink",
    "init_database",
    # Config and logging
    "BattleConfig",
    "load_config",
    "setup_logging",
    # Errors
    "ErrorCode",
    "QuizBattleError",
    "ConfigError",
    "StoreError",
    "BattleError",
    "HalfAppliedTransitionError",
    "SyncFailedError",
    "format_battle_error",
    # Types
    "MatchingPair",
    "QuestionPayload",
    "GradeResult",
    "AttemptAnswer",
    "AttemptPayload",
    "LeaderboardRow",
    "ResultsView",
]
