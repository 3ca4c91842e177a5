# Area: Battle
"""
quiz_battle._battle.lobby_timer — Lobby and question deadlines
==============================================================

Tracks per-battle deadlines keyed by join code. A lobby where the host
is alone gets a deadline; when it expires the lobby is expired by the
orchestrator. In-progress battles get a time budget after which silent
participants are forfeited.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List

logger = logging.getLogger("quiz_battle.battle.timer")

PHASE_LOBBY = "lobby"
PHASE_BATTLE = "battle"


class DeadlineTracker:
    """
    Tracks battle deadlines keyed by join code.

    Each deadline stores the phase it was set for, the join code,
    and the monotonic timestamp at which it expires.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._deadlines: Dict[str, dict] = {}

    def set_deadline(self, phase: str, join_code: str, deadline_seconds: float) -> None:
        """Set (or overwrite) a deadline for a battle."""
        expires_at = self._clock() + deadline_seconds
        self._deadlines[join_code] = {
            "phase": phase,
            "join_code": join_code,
            "expires_at": expires_at,
        }
        logger.debug(
            "Deadline set: %s for %s (%.1fs)",
            phase, join_code, deadline_seconds,
        )

    def has_deadline(self, join_code: str) -> bool:
        return join_code in self._deadlines

    def remaining(self, join_code: str) -> float:
        """Seconds left for a battle's deadline (0 if none or expired)."""
        entry = self._deadlines.get(join_code)
        if entry is None:
            return 0.0
        return max(0.0, entry["expires_at"] - self._clock())

    def check_expired(self) -> List[dict]:
        """
        Return list of expired deadlines and remove them from tracking.

        Each returned dict contains 'phase' and 'join_code'.
        """
        now = self._clock()
        expired = [
            {"phase": entry["phase"], "join_code": entry["join_code"]}
            for entry in self._deadlines.values()
            if now >= entry["expires_at"]
        ]
        for item in expired:
            del self._deadlines[item["join_code"]]

        if expired:
            logger.info("Expired deadlines: %s", expired)

        return expired

    def cancel(self, join_code: str) -> None:
        """Cancel a battle's deadline. No-op if not found."""
        if self._deadlines.pop(join_code, None) is not None:
            logger.debug("Deadline cancelled for %s", join_code)

    def clear(self) -> None:
        self._deadlines.clear()
