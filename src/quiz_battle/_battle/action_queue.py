# Area: Battle
"""
quiz_battle._battle.action_queue — Per-client ordered actions
=============================================================

Actions a client issues (ready, submit answer, leave, ...) are queued
and applied strictly in submission order. A rejected action is recorded
as a failed outcome and the queue moves on to the next one.
"""

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, List, Optional, Tuple

from ..errors import QuizBattleError

logger = logging.getLogger("quiz_battle.battle.queue")


@dataclass
class ActionOutcome:
    """Result of one drained action."""

    name: str
    ok: bool
    value: Any = None
    error: Optional[QuizBattleError] = None


class ActionQueue:
    """FIFO of pending actions for one client."""

    def __init__(self) -> None:
        self._pending: Deque[Tuple[str, Callable[..., Any], tuple, dict]] = deque()
        self.history: List[ActionOutcome] = []

    def __len__(self) -> int:
        return len(self._pending)

    def enqueue(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._pending.append((name, fn, args, kwargs))
        logger.debug("Queued %s (%d pending)", name, len(self._pending))

    def drain(self) -> List[ActionOutcome]:
        """
        Apply every pending action in order.

        Battle errors are captured in the outcome. Any other exception
        propagates and leaves the remaining actions queued.
        """
        outcomes: List[ActionOutcome] = []
        while self._pending:
            name, fn, args, kwargs = self._pending.popleft()
            try:
                outcome = ActionOutcome(name=name, ok=True, value=fn(*args, **kwargs))
            except QuizBattleError as e:
                logger.info("Action %s rejected: %s", name, e)
                outcome = ActionOutcome(name=name, ok=False, error=e)
            outcomes.append(outcome)
            self.history.append(outcome)
        return outcomes

    def clear(self) -> None:
        self._pending.clear()
