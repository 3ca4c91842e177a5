# Area: Battle
"""
quiz_battle._battle.enums — Battle lifecycle enums
==================================================

Defines the statuses and events of the battle state machine.
"""

from enum import Enum


class BattleStatus(Enum):
    """
    Lifecycle status of a battle, shared by both stores.

    State transitions:
    WAITING -> IN_PROGRESS (on START)
    IN_PROGRESS -> COMPLETED (on COMPLETE)
    WAITING -> CANCELLED (on CANCEL)
    IN_PROGRESS -> CANCELLED (on CANCEL)
    """
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (BattleStatus.WAITING, BattleStatus.IN_PROGRESS)


class BattleEvent(Enum):
    """
    Events that trigger status transitions.

    Events are triggered by:
    - START: host starts the battle with everyone ready
    - COMPLETE: every participant finished, or the time budget ran out
    - CANCEL: host abandoned the lobby/battle, the quiz was deleted,
      the lobby expired, or cleanup found the battle stale
    """
    START = "START"
    COMPLETE = "COMPLETE"
    CANCEL = "CANCEL"
