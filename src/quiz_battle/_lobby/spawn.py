# Area: Lobby
"""Random placement of newly joined avatars."""

from __future__ import annotations
import math
import random
from dataclasses import replace
from typing import Optional

from .physics import Avatar, LobbyState

SPAWN_ATTEMPTS = 50
SPAWN_MARGIN = 3.0
INITIAL_SPEED = 1.2


def _random_point(state: LobbyState, rng: random.Random):
    r, arena = state.radius, state.arena
    width = (arena.max_x - arena.min_x) - 4 * r
    height = (arena.max_y - arena.min_y) - 2 * r - 2 * SPAWN_MARGIN
    x = arena.min_x + 2 * r + rng.random() * max(width, 0.0)
    y = arena.min_y + r + SPAWN_MARGIN + rng.random() * max(height, 0.0)
    return x, y


def _too_close(state: LobbyState, x: float, y: float) -> bool:
    limit = 2 * state.radius + SPAWN_MARGIN
    return any(math.hypot(x - a.x, y - a.y) < limit for a in state.avatars)


def spawn_avatar(
    state: LobbyState,
    participant_id: str,
    rng: Optional[random.Random] = None,
) -> LobbyState:
    """
    Add an avatar at a random free spot.

    Tries up to SPAWN_ATTEMPTS positions and keeps the first one that is
    at least ``2 * radius + SPAWN_MARGIN`` from every existing avatar;
    if none qualifies the last attempt is used. Starting velocity is
    random in [-0.6, 0.6) per axis.
    """
    rng = rng or random.Random()
    x = y = 0.0
    for _ in range(SPAWN_ATTEMPTS):
        x, y = _random_point(state, rng)
        if not _too_close(state, x, y):
            break

    x, y = state.arena.clamp(x, y, state.radius)
    avatar = Avatar(
        participant_id=participant_id,
        x=x,
        y=y,
        vx=(rng.random() - 0.5) * INITIAL_SPEED,
        vy=(rng.random() - 0.5) * INITIAL_SPEED,
    )
    return replace(state, avatars=state.avatars + (avatar,))


def remove_avatar(state: LobbyState, participant_id: str) -> LobbyState:
    """Drop an avatar (player left the lobby)."""
    kept = tuple(a for a in state.avatars if a.participant_id != participant_id)
    return replace(state, avatars=kept)
