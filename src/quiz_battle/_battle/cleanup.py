# Area: Battle
"""
quiz_battle._battle.cleanup — Abandoned battle cleanup
======================================================

Cancels battles nobody finished: lobbies left waiting and battles left
in progress past their cutoffs. Their rooms are dropped from the
presence store.
"""

from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from ..config import BattleConfig
from ..errors import StoreError
from .enums import BattleStatus
from .stores import DurableBattleStore, PresenceStore, battle_path

logger = logging.getLogger("quiz_battle.battle.cleanup")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BattleCleaner:
    """Periodic sweep over the durable store."""

    def __init__(
        self,
        durable: DurableBattleStore,
        presence: PresenceStore,
        config: Optional[BattleConfig] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.durable = durable
        self.presence = presence
        self.config = config or BattleConfig()
        self._now = now

    def run(self) -> List[str]:
        """
        Cancel stale battles.

        Returns:
            Join codes that were cancelled
        """
        now = self._now()
        stale = self.durable.find_stale_battles(
            waiting_before=now - timedelta(minutes=self.config.waiting_timeout_minutes),
            in_progress_before=now - timedelta(hours=self.config.in_progress_timeout_hours),
        )
        cancelled = []
        for battle in stale:
            try:
                self.durable.set_status(battle.join_code, BattleStatus.CANCELLED)
            except StoreError as e:
                logger.warning(f"[{battle.join_code}] Cleanup could not cancel battle: {e}")
                continue
            self.presence.remove(battle_path(battle.join_code))
            cancelled.append(battle.join_code)
            logger.info(f"[{battle.join_code}] Cleaned up stale {battle.status.value} battle")
        if cancelled:
            logger.info(f"Cleanup cancelled {len(cancelled)} battle(s)")
        return cancelled
