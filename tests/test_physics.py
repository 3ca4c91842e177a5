# Area: Lobby Tests
"""Tests for the lobby avatar physics step."""

import math
import random

import pytest

from quiz_battle._lobby import (
    AVATAR_RADIUS,
    Arena,
    Avatar,
    LobbyState,
    min_center_distance,
    run_ticks,
    spawn_avatar,
    tick,
)
from quiz_battle._lobby.physics import WALL_DAMPING


def _crowd(count, seed=4):
    rng = random.Random(seed)
    state = LobbyState()
    for n in range(count):
        state = spawn_avatar(state, f"p{n}", rng)
    return state


def _inside(state):
    r, arena = state.radius, state.arena
    return all(arena.contains(a.x, a.y, r) for a in state.avatars)


class TestTickPurity:
    """tick returns a new state and leaves its input alone."""

    def test_input_is_unchanged(self):
        """The original state keeps its avatars and tick count."""
        state = LobbyState(avatars=(Avatar("a", 50, 50, 1.0, 0.5),))
        after = tick(state)
        assert state.avatars[0] == Avatar("a", 50, 50, 1.0, 0.5)
        assert state.tick_count == 0
        assert after.tick_count == 1
        assert after.avatars[0].x == pytest.approx(51.0)
        assert after.avatars[0].y == pytest.approx(50.5)

    def test_empty_lobby(self):
        """No avatars is a valid state."""
        assert tick(LobbyState()).avatars == ()

    def test_deterministic(self):
        """The same input produces the same output."""
        state = _crowd(6)
        assert run_ticks(state, 25) == run_ticks(state, 25)


class TestWalls:
    """Avatars stay inside the arena."""

    def test_bounce_reverses_and_damps(self):
        """Hitting the right wall flips vx and applies wall damping."""
        state = LobbyState(avatars=(Avatar("a", 96.0, 50.0, 4.0, 0.0),))
        after = tick(state).avatars[0]
        assert after.x == pytest.approx(100.0 - AVATAR_RADIUS)
        assert after.vx == pytest.approx(-4.0 * WALL_DAMPING)

    def test_top_band_is_kept_free(self):
        """The header band above min_y is never entered."""
        state = LobbyState(avatars=(Avatar("a", 50.0, 12.0, 0.0, -9.0),))
        after = tick(state).avatars[0]
        assert after.y == pytest.approx(8.0 + AVATAR_RADIUS)
        assert after.vy > 0

    def test_bounds_hold_over_many_ticks(self):
        """A crowded lobby stays inside after hundreds of ticks."""
        state = _crowd(8)
        for _ in range(300):
            state = tick(state)
            assert _inside(state)

    def test_non_finite_values_are_sanitized(self):
        """NaN positions and velocities do not escape the step."""
        state = LobbyState(avatars=(Avatar("a", math.nan, 40.0, math.inf, math.nan),))
        after = tick(state).avatars[0]
        assert math.isfinite(after.x) and math.isfinite(after.y)
        assert (after.vx, after.vy) == (0.0, 0.0)
        assert _inside(tick(state))


class TestCollisions:
    """Avatars never overlap after a step."""

    def test_overlapping_pair_is_separated(self):
        """Two overlapping avatars end at least 2r apart."""
        state = LobbyState(avatars=(Avatar("a", 50.0, 50.0), Avatar("b", 51.0, 50.0)))
        after = tick(state)
        assert min_center_distance(after) >= 2 * AVATAR_RADIUS - 1e-6

    def test_coincident_centers_are_separated(self):
        """Identical positions are pushed apart along x."""
        state = LobbyState(avatars=(Avatar("a", 50.0, 50.0), Avatar("b", 50.0, 50.0)))
        a, b = tick(state).avatars
        assert a.x < b.x
        assert a.y == pytest.approx(b.y)

    def test_head_on_velocities_are_exchanged_with_damping(self):
        """Approaching avatars stop approaching after contact."""
        state = LobbyState(avatars=(Avatar("a", 48.0, 50.0, 1.0, 0.0),
                                    Avatar("b", 52.0, 50.0, -1.0, 0.0)))
        a, b = tick(state).avatars
        assert b.vx - a.vx >= 0

    def test_crowd_never_overlaps(self):
        """Eight avatars keep their distance tick after tick."""
        state = _crowd(8, seed=11)
        for _ in range(200):
            state = tick(state)
            assert min_center_distance(state) >= 2 * state.radius - 0.05

    def test_custom_arena(self):
        """The arena and radius come from the state."""
        arena = Arena(min_x=0, max_x=20, min_y=0, max_y=20)
        state = LobbyState(avatars=(Avatar("a", 19.0, 19.0, 3.0, 3.0),), radius=1.0, arena=arena)
        after = tick(state).avatars[0]
        assert (after.x, after.y) == (pytest.approx(19.0), pytest.approx(19.0))


class TestMinCenterDistance:
    """Distance helper."""

    def test_single_avatar(self):
        """Fewer than two avatars is infinite."""
        assert min_center_distance(LobbyState(avatars=(Avatar("a", 1, 1),))) == math.inf
