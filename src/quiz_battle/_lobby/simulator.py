# Area: Lobby
"""
quiz_battle._lobby.simulator — Lobby simulation driver
======================================================

Keeps a LobbyState in step with the presence list and advances it.
The simulation is cosmetic: ``step`` logs and swallows any failure,
keeping the last good state, so a physics fault never blocks the
battle from starting.
"""

from __future__ import annotations
import logging
import random
from typing import Dict, Iterable, Optional, Tuple

from .physics import LobbyState, tick
from .spawn import remove_avatar, spawn_avatar

logger = logging.getLogger("quiz_battle.lobby")


class LobbySimulator:
    """
    Avatar simulation for one lobby screen.

    Attributes:
        state: Current LobbyState
        rng: Random source used for spawning
    """

    def __init__(self, state: Optional[LobbyState] = None, rng: Optional[random.Random] = None):
        self.state = state or LobbyState()
        self.rng = rng or random.Random()
        self.failures = 0

    def participant_ids(self) -> Tuple[str, ...]:
        return tuple(a.participant_id for a in self.state.avatars)

    def add(self, participant_id: str) -> None:
        """Spawn an avatar for a player who joined (no-op if present)."""
        if participant_id in self.participant_ids():
            return
        self.state = spawn_avatar(self.state, participant_id, self.rng)
        logger.debug("Avatar spawned for %s", participant_id)

    def remove(self, participant_id: str) -> None:
        self.state = remove_avatar(self.state, participant_id)

    def sync_presence(self, participant_ids: Iterable[str]) -> None:
        """
        Match avatars to the current presence snapshot.

        New ids get an avatar, ids no longer present lose theirs.
        Existing avatars keep their position and velocity.
        """
        wanted = list(dict.fromkeys(participant_ids))
        current = set(self.participant_ids())
        for pid in current - set(wanted):
            self.remove(pid)
        for pid in wanted:
            if pid not in current:
                self.add(pid)

    def step(self, dt: float = 1.0) -> LobbyState:
        """Advance one tick. Failures are logged and the old state kept."""
        try:
            self.state = tick(self.state, dt)
        except Exception:
            self.failures += 1
            logger.warning("Lobby tick failed, keeping previous state", exc_info=True)
        return self.state

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {a.participant_id: (a.x, a.y) for a in self.state.avatars}

    def reset(self) -> None:
        """Discard all avatars (battle moved to in_progress)."""
        self.state = LobbyState(radius=self.state.radius, arena=self.state.arena)
