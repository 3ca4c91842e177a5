# Area: Lobby
"""
Lobby avatar simulation.

This package handles:
- The pure fixed-timestep physics tick
- Random non-overlapping spawn placement
- A driver that follows the presence list and never raises
"""

from .physics import (
    Arena,
    Avatar,
    LobbyState,
    AVATAR_RADIUS,
    TICK_INTERVAL_MS,
    tick,
    run_ticks,
    min_center_distance,
)
from .spawn import spawn_avatar, remove_avatar, SPAWN_ATTEMPTS, SPAWN_MARGIN
from .simulator import LobbySimulator

__all__ = [
    "Arena",
    "Avatar",
    "LobbyState",
    "AVATAR_RADIUS",
    "TICK_INTERVAL_MS",
    "tick",
    "run_ticks",
    "min_center_distance",
    "spawn_avatar",
    "remove_avatar",
    "SPAWN_ATTEMPTS",
    "SPAWN_MARGIN",
    "LobbySimulator",
]
