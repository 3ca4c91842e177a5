# Area: Battle
"""
quiz_battle._battle.state_machine — Battle status transitions
=============================================================

Owns transition legality for a battle's status. The orchestrator
checks every durable and ephemeral status change against this table.
"""

import logging
from typing import Optional

from ..errors import BattleError, ErrorCode
from .enums import BattleEvent, BattleStatus

logger = logging.getLogger("quiz_battle.battle.state_machine")


# Valid status transitions: {current_status: {event: next_status}}
TRANSITIONS = {
    BattleStatus.WAITING: {
        BattleEvent.START: BattleStatus.IN_PROGRESS,
        BattleEvent.CANCEL: BattleStatus.CANCELLED,
    },
    BattleStatus.IN_PROGRESS: {
        BattleEvent.COMPLETE: BattleStatus.COMPLETED,
        BattleEvent.CANCEL: BattleStatus.CANCELLED,
    },
    BattleStatus.COMPLETED: {},
    BattleStatus.CANCELLED: {},
}


def next_status(current: BattleStatus, event: BattleEvent) -> Optional[BattleStatus]:
    """Status reached from ``current`` on ``event``, or None if illegal."""
    return TRANSITIONS.get(current, {}).get(event)


class BattleStateMachine:
    """
    Status tracker for one battle.

    Attributes:
        join_code: Battle this machine belongs to
        current_status: The current lifecycle status
    """

    def __init__(self, join_code: str, status: BattleStatus = BattleStatus.WAITING):
        self.join_code = join_code
        self.current_status = status

    def can_transition(self, event: BattleEvent) -> bool:
        """
        Check if a transition is valid from the current status.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return next_status(self.current_status, event) is not None

    def require(self, event: BattleEvent) -> BattleStatus:
        """
        Return the status ``event`` would lead to, without changing state.

        Raises:
            BattleError: INVALID_STATUS if the transition is not valid
        """
        target = next_status(self.current_status, event)
        if target is None:
            raise BattleError(
                ErrorCode.INVALID_STATUS,
                f"Cannot {event.value.lower()} a battle that is {self.current_status.value}",
                join_code=self.join_code,
                details={"status": self.current_status.value, "event": event.value},
            )
        return target

    def transition(self, event: BattleEvent) -> BattleStatus:
        """
        Execute a status transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new status after transition

        Raises:
            BattleError: INVALID_STATUS if the transition is not valid
        """
        target = self.require(event)
        logger.info(
            f"[{self.join_code}] Status: {self.current_status.value} → {target.value}"
        )
        self.current_status = target
        return target
