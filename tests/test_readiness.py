# Area: Battle Tests
"""Tests for readiness aggregation over presence snapshots."""

from quiz_battle._battle import Readiness, aggregate_readiness, all_finished
from quiz_battle._battle.readiness import scores_from_snapshot


class TestAggregateReadiness:
    """Reducing a players snapshot."""

    def test_counts(self):
        """Viewers and malformed entries are ignored; not_ready is sorted."""
        snapshot = {
            "zed": {"is_ready": False},
            "amy": {"is_ready": True},
            "bob": {},
            "eve": {"is_ready": True, "is_viewer": True},
            "bad": "garbage",
        }
        readiness = aggregate_readiness(snapshot)
        assert readiness == Readiness(player_count=3, ready_count=1, not_ready=["bob", "zed"])
        assert readiness.all_ready is False
        assert readiness.missing_players(5) == 2

    def test_order_independent(self):
        """Snapshot order does not matter."""
        a = {"x": {"is_ready": False}, "y": {"is_ready": True}}
        b = {"y": {"is_ready": True}, "x": {"is_ready": False}}
        assert aggregate_readiness(a) == aggregate_readiness(b)

    def test_empty_lobby_is_not_ready(self):
        """Nobody present is never all ready."""
        assert aggregate_readiness(None).all_ready is False
        assert aggregate_readiness({}).player_count == 0

    def test_all_ready(self):
        """Everyone ready."""
        assert aggregate_readiness({"a": {"is_ready": True}}).all_ready is True


class TestAllFinished:
    """Completion detection."""

    def test_finished_or_forfeited(self):
        """Finished, forfeited and caught-up players all count as done."""
        snapshot = {
            "a": {"finished": True},
            "b": {"forfeited": True, "current_question": 0},
            "c": {"current_question": 3},
        }
        assert all_finished(snapshot, 3) is True

    def test_someone_still_answering(self):
        """One player behind keeps the battle open."""
        assert all_finished({"a": {"finished": True}, "b": {"current_question": 1}}, 3) is False

    def test_empty(self):
        """An empty room is not finished."""
        assert all_finished({}, 3) is False


class TestScores:
    """Score extraction."""

    def test_scores(self):
        """Missing scores read as zero; viewers are skipped."""
        snapshot = {"a": {"score": 4}, "b": {}, "v": {"is_viewer": True, "score": 9}}
        assert scores_from_snapshot(snapshot) == {"a": 4, "b": 0}
