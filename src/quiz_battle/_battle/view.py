# Area: Battle
"""
quiz_battle._battle.view — Subscribe-and-diff lobby view
========================================================

Keeps one client's lobby screen in step with the presence store. Each
snapshot delivered by the store replaces the previous one; readiness is
recomputed from it and the avatar simulation is told which players are
present. Nothing is merged incrementally.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

from .._lobby import LobbySimulator
from .enums import BattleStatus
from .readiness import Readiness, aggregate_readiness
from .stores import PresenceStore, Unsubscribe, metadata_path, players_path

logger = logging.getLogger("quiz_battle.battle.view")


class LobbyView:
    """
    Live lobby state for one client.

    Attributes:
        join_code: Battle being watched
        readiness: Readiness of the latest snapshot
        status: Room status from the latest metadata snapshot
        simulator: Avatar simulation following the presence list
    """

    def __init__(
        self,
        presence: PresenceStore,
        join_code: str,
        simulator: Optional[LobbySimulator] = None,
        on_change: Optional[Callable[["LobbyView"], None]] = None,
    ):
        self.presence = presence
        self.join_code = join_code
        self.simulator = simulator or LobbySimulator()
        self.on_change = on_change
        self.players: Dict[str, Dict[str, Any]] = {}
        self.readiness = Readiness(player_count=0, ready_count=0)
        self.status: Optional[str] = None
        self.reason: Optional[str] = None
        self._unsubscribes: List[Unsubscribe] = []

    def open(self) -> None:
        self._unsubscribes = [
            self.presence.subscribe(players_path(self.join_code), self._on_players),
            self.presence.subscribe(metadata_path(self.join_code), self._on_metadata),
        ]

    def close(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []

    def _on_players(self, snapshot: Any) -> None:
        self.players = dict(snapshot) if isinstance(snapshot, dict) else {}
        self.readiness = aggregate_readiness(self.players)
        if self.status in (None, BattleStatus.WAITING.value):
            self.simulator.sync_presence(
                uid for uid, rec in self.players.items()
                if isinstance(rec, dict) and not rec.get("is_viewer")
            )
        self._notify()

    def _on_metadata(self, snapshot: Any) -> None:
        previous = self.status
        if isinstance(snapshot, dict):
            self.status = snapshot.get("status")
            self.reason = snapshot.get("reason")
        else:
            self.status = None
        if previous != self.status:
            logger.debug(f"[{self.join_code}] Room status: {previous} -> {self.status}")
            if self.status != BattleStatus.WAITING.value:
                self.simulator.reset()
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    @property
    def closed(self) -> bool:
        """True once the room is gone or cancelled."""
        return self.status in (None, BattleStatus.CANCELLED.value)
