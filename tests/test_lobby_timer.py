# Area: Battle Tests
"""Tests for DeadlineTracker."""

from quiz_battle._battle.lobby_timer import PHASE_BATTLE, PHASE_LOBBY, DeadlineTracker


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


class TestDeadlineTracker:
    """Deadline bookkeeping against a fake monotonic clock."""

    def test_set_and_remaining(self):
        """Remaining time counts down with the clock."""
        clock = FakeClock()
        tracker = DeadlineTracker(clock=clock)
        tracker.set_deadline(PHASE_LOBBY, "123456", 60)
        clock.now += 15
        assert tracker.has_deadline("123456")
        assert tracker.remaining("123456") == 45.0

    def test_expiry_removes_entry(self):
        """Expired deadlines are returned once and removed."""
        clock = FakeClock()
        tracker = DeadlineTracker(clock=clock)
        tracker.set_deadline(PHASE_LOBBY, "111111", 10)
        tracker.set_deadline(PHASE_BATTLE, "222222", 100)
        clock.now += 10
        assert tracker.check_expired() == [{"phase": PHASE_LOBBY, "join_code": "111111"}]
        assert tracker.check_expired() == []
        assert tracker.remaining("111111") == 0.0

    def test_overwrite(self):
        """Setting again replaces phase and expiry."""
        clock = FakeClock()
        tracker = DeadlineTracker(clock=clock)
        tracker.set_deadline(PHASE_LOBBY, "111111", 10)
        tracker.set_deadline(PHASE_BATTLE, "111111", 50)
        clock.now += 20
        assert tracker.check_expired() == []

    def test_cancel_and_clear(self):
        """Cancel is a no-op for unknown codes; clear drops everything."""
        tracker = DeadlineTracker(clock=FakeClock())
        tracker.cancel("nope")
        tracker.set_deadline(PHASE_LOBBY, "111111", 10)
        tracker.set_deadline(PHASE_LOBBY, "222222", 10)
        tracker.cancel("111111")
        assert not tracker.has_deadline("111111")
        tracker.clear()
        assert not tracker.has_deadline("222222")
