# Area: Lobby
"""
quiz_battle._lobby.physics — Lobby avatar physics
=================================================

Fixed-timestep 2-D simulation of lobby avatars bouncing around a
bounded arena while players wait for a battle to start.

``tick(state, dt)`` is pure: it returns a new LobbyState and never
mutates its input. Velocities are per-tick deltas in arena units
(the arena is 0-100 wide), not per-second rates.

Per tick:
    1. Pairwise collision detection (distance < 2 * radius)
    2. Damped impulse along the normal for closing pairs
    3. Positional de-overlap, half the overlap each plus 5%
    4. Integrate position += velocity * dt
    5. Wall reflection with wall damping, clamp to the interior
    6. Separation passes and a final clamp inside bounds
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from typing import List, Tuple

# Simulation constants
TICK_INTERVAL_MS = 30
AVATAR_RADIUS = 2.5
COLLISION_DAMPING = 0.85
WALL_DAMPING = 0.92
SEPARATION_MARGIN = 0.05
SEPARATION_PASSES = 20

# Distances below this are treated as coincident centers
_COINCIDENT = 1e-9


@dataclass(frozen=True)
class Arena:
    """
    Legal area for avatar centers before the radius is applied.

    The default leaves a band at the top (header) and bottom
    (ready button) of the lobby screen free of avatars.
    """

    min_x: float = 0.0
    max_x: float = 100.0
    min_y: float = 8.0
    max_y: float = 88.0

    def clamp(self, x: float, y: float, radius: float) -> Tuple[float, float]:
        """Clamp a center so the whole avatar stays inside."""
        x = min(max(x, self.min_x + radius), self.max_x - radius)
        y = min(max(y, self.min_y + radius), self.max_y - radius)
        return x, y

    def contains(self, x: float, y: float, radius: float) -> bool:
        return (self.min_x + radius <= x <= self.max_x - radius
                and self.min_y + radius <= y <= self.max_y - radius)


@dataclass(frozen=True)
class Avatar:
    """One avatar: participant id, center position and per-tick velocity."""

    participant_id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0


@dataclass(frozen=True)
class LobbyState:
    """All avatars plus the shared radius and arena bounds."""

    avatars: Tuple[Avatar, ...] = ()
    radius: float = AVATAR_RADIUS
    arena: Arena = field(default_factory=Arena)
    tick_count: int = 0


class _Body:
    """Mutable working copy of an Avatar used inside one tick."""

    __slots__ = ("pid", "x", "y", "vx", "vy")

    def __init__(self, avatar: Avatar):
        self.pid = avatar.participant_id
        self.x, self.y = avatar.x, avatar.y
        self.vx, self.vy = avatar.vx, avatar.vy

    def freeze(self) -> Avatar:
        return Avatar(self.pid, self.x, self.y, self.vx, self.vy)


def _normal(a: _Body, b: _Body) -> Tuple[float, float, float]:
    """Unit vector from a to b and the distance between them."""
    dx, dy = b.x - a.x, b.y - a.y
    dist = math.hypot(dx, dy)
    if dist < _COINCIDENT:
        # Coincident centers: separate along x
        return 1.0, 0.0, 0.0
    return dx / dist, dy / dist, dist


def _push_apart(a: _Body, b: _Body, nx: float, ny: float, overlap: float) -> None:
    push = overlap / 2.0 * (1.0 + SEPARATION_MARGIN)
    a.x -= push * nx
    a.y -= push * ny
    b.x += push * nx
    b.y += push * ny


def _resolve_collisions(bodies: List[_Body], radius: float) -> None:
    min_dist = 2.0 * radius
    for i in range(len(bodies)):
        for j in range(i + 1, len(bodies)):
            a, b = bodies[i], bodies[j]
            nx, ny, dist = _normal(a, b)
            if dist >= min_dist:
                continue

            rvn = (b.vx - a.vx) * nx + (b.vy - a.vy) * ny
            if rvn < 0:
                impulse = rvn * COLLISION_DAMPING
                a.vx += impulse * nx
                a.vy += impulse * ny
                b.vx -= impulse * nx
                b.vy -= impulse * ny

            _push_apart(a, b, nx, ny, min_dist - dist)


def _bounce_walls(body: _Body, radius: float, arena: Arena) -> None:
    if body.x - radius < arena.min_x:
        body.x = arena.min_x + radius
        body.vx = abs(body.vx) * WALL_DAMPING
    elif body.x + radius > arena.max_x:
        body.x = arena.max_x - radius
        body.vx = -abs(body.vx) * WALL_DAMPING

    if body.y - radius < arena.min_y:
        body.y = arena.min_y + radius
        body.vy = abs(body.vy) * WALL_DAMPING
    elif body.y + radius > arena.max_y:
        body.y = arena.max_y - radius
        body.vy = -abs(body.vy) * WALL_DAMPING


def _separate(bodies: List[_Body], radius: float, arena: Arena) -> None:
    """Push remaining overlaps apart, clamping after every push."""
    min_dist = 2.0 * radius
    for _ in range(SEPARATION_PASSES):
        found = False
        for i in range(len(bodies)):
            for j in range(i + 1, len(bodies)):
                a, b = bodies[i], bodies[j]
                nx, ny, dist = _normal(a, b)
                if dist >= min_dist:
                    continue
                found = True
                _push_apart(a, b, nx, ny, min_dist - dist)
                a.x, a.y = arena.clamp(a.x, a.y, radius)
                b.x, b.y = arena.clamp(b.x, b.y, radius)
        if not found:
            return


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def tick(state: LobbyState, dt: float = 1.0) -> LobbyState:
    """
    Advance the lobby simulation by one step.

    Args:
        state: Current lobby state (not modified)
        dt: Step scale; 1.0 is one fixed tick

    Returns:
        New LobbyState with every avatar strictly inside the arena
    """
    radius, arena = state.radius, state.arena
    bodies = [_Body(a) for a in state.avatars]

    for body in bodies:
        # Drop NaN/inf from upstream state before it spreads
        body.vx, body.vy = _finite(body.vx), _finite(body.vy)
        if not (math.isfinite(body.x) and math.isfinite(body.y)):
            body.x = (arena.min_x + arena.max_x) / 2.0
            body.y = (arena.min_y + arena.max_y) / 2.0

    _resolve_collisions(bodies, radius)

    for body in bodies:
        body.x += body.vx * dt
        body.y += body.vy * dt

    for body in bodies:
        _bounce_walls(body, radius, arena)

    _separate(bodies, radius, arena)

    for body in bodies:
        body.x, body.y = arena.clamp(body.x, body.y, radius)

    return replace(
        state,
        avatars=tuple(b.freeze() for b in bodies),
        tick_count=state.tick_count + 1,
    )


def run_ticks(state: LobbyState, count: int, dt: float = 1.0) -> LobbyState:
    """Apply ``tick`` ``count`` times."""
    for _ in range(count):
        state = tick(state, dt)
    return state


def min_center_distance(state: LobbyState) -> float:
    """Smallest distance between any two avatar centers (inf for < 2 avatars)."""
    avatars = state.avatars
    best = math.inf
    for i in range(len(avatars)):
        for j in range(i + 1, len(avatars)):
            a, b = avatars[i], avatars[j]
            best = min(best, math.hypot(b.x - a.x, b.y - a.y))
    return best
