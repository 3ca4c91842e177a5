# Area: Storage Tests
"""Contract tests run against both durable store backends."""

import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from quiz_battle._battle import BattleStatus
from quiz_battle._storage import InMemoryBattleStore, SqliteBattleStore, init_database
from quiz_battle.errors import BattleError, ErrorCode, StoreError


class Clock:
    """Settable UTC clock for store timestamps."""

    def __init__(self):
        self.now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def db_path():
    """Create a temporary database for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_database(path)
    yield path
    os.unlink(path)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, clock):
    if request.param == "memory":
        return InMemoryBattleStore(now=clock)
    return SqliteBattleStore(request.getfixturevalue("db_path"), now=clock)


def _create(store, code="123456", max_players=4):
    return store.create_battle(
        quiz_id=7, host_id="host", host_name="Hana", join_code=code,
        total_questions=5, max_players=max_players, quiz_title="Capitals",
    )


def _code(fn):
    with pytest.raises(BattleError) as exc:
        fn()
    return exc.value.code


class TestCreateAndJoin:
    """Battle rows and participant rows."""

    def test_create(self, store):
        """The battle starts waiting with the host as its only participant."""
        battle = _create(store)
        assert battle.status == BattleStatus.WAITING
        assert battle.quiz_title == "Capitals"
        assert battle.battle_id is not None
        participants = store.list_participants("123456")
        assert [(p.user_id, p.is_host) for p in participants] == [("host", True)]

    def test_unknown_battle(self, store):
        """get_battle returns None and writes raise NOT_FOUND."""
        assert store.get_battle("999999") is None
        assert _code(lambda: store.add_participant("999999", "u", "U")) == ErrorCode.NOT_FOUND

    def test_join_is_idempotent(self, store):
        """Joining twice returns the existing row."""
        _create(store)
        store.add_participant("123456", "gil", "Gil", avatar="owl")
        again = store.add_participant("123456", "gil", "Gil")
        assert again.avatar == "owl"
        assert len(store.list_participants("123456")) == 2

    def test_capacity(self, store):
        """The participant cap rejects further joins."""
        _create(store, max_players=2)
        store.add_participant("123456", "gil", "Gil")
        with pytest.raises(BattleError) as exc:
            store.add_participant("123456", "kim", "Kim")
        assert exc.value.code == ErrorCode.TOO_MANY_PLAYERS
        assert exc.value.details["max_players"] == 2

    def test_remove_while_waiting(self, store):
        """Participants can leave a waiting battle."""
        _create(store)
        store.add_participant("123456", "gil", "Gil")
        store.remove_participant("123456", "gil")
        assert [p.user_id for p in store.list_participants("123456")] == ["host"]


class TestStart:
    """Guarded waiting -> in_progress."""

    def test_start(self, store):
        """A valid start flips the status and records the question count."""
        _create(store)
        store.add_participant("123456", "gil", "Gil")
        battle = store.start_battle("123456", "host", 2, 2, 3)
        assert battle.status == BattleStatus.IN_PROGRESS
        assert battle.total_questions == 3
        assert battle.started_at is not None

    def test_guards(self, store):
        """Non-host, too few players and changed counts are rejected."""
        _create(store)
        assert _code(lambda: store.start_battle("123456", "gil", 1, 2, 3)) == ErrorCode.NOT_HOST
        assert _code(lambda: store.start_battle("123456", "host", 1, 2, 3)) == \
            ErrorCode.NOT_ENOUGH_PLAYERS
        store.add_participant("123456", "gil", "Gil")
        store.add_participant("123456", "kim", "Kim")
        with pytest.raises(BattleError) as exc:
            store.start_battle("123456", "host", 2, 2, 3)
        assert exc.value.details["reason"] == "participants_changed"
        assert store.get_battle("123456").status == BattleStatus.WAITING

    def test_no_restart(self, store):
        """Starting twice is INVALID_STATUS."""
        _create(store)
        store.add_participant("123456", "gil", "Gil")
        store.start_battle("123456", "host", 2, 2, 3)
        assert _code(lambda: store.start_battle("123456", "host", 2, 2, 3)) == \
            ErrorCode.INVALID_STATUS

    def test_no_join_or_leave_after_start(self, store):
        """The roster is frozen once started."""
        _create(store)
        store.add_participant("123456", "gil", "Gil")
        store.start_battle("123456", "host", 2, 2, 3)
        assert _code(lambda: store.add_participant("123456", "kim", "Kim")) == \
            ErrorCode.INVALID_STATUS
        assert _code(lambda: store.remove_participant("123456", "gil")) == \
            ErrorCode.INVALID_STATUS

    def test_existing_participant_cannot_rejoin_after_start(self, store):
        """A started battle refuses add_participant even for a current participant."""
        _create(store)
        store.add_participant("123456", "gil", "Gil")
        store.start_battle("123456", "host", 2, 2, 3)
        store.update_score("123456", "gil", 3)
        store.mark_forfeited("123456", "gil")
        assert _code(lambda: store.add_participant("123456", "gil", "Gil")) == \
            ErrorCode.INVALID_STATUS
        gil = [p for p in store.list_participants("123456") if p.user_id == "gil"][0]
        assert (gil.score, gil.forfeited) == (3, True)


class TestScoresAndResults:
    """Score writes and finalization."""

    @pytest.fixture
    def running(self, store):
        _create(store)
        store.add_participant("123456", "gil", "Gil")
        store.start_battle("123456", "host", 2, 2, 3)
        return store

    def test_update_score_and_forfeit(self, running):
        """Score and forfeit flags are stored per participant."""
        running.update_score("123456", "gil", 6)
        running.mark_forfeited("123456", "gil")
        gil = [p for p in running.list_participants("123456") if p.user_id == "gil"][0]
        assert (gil.score, gil.forfeited) == (6, True)

    def test_unknown_participant(self, running):
        """Writes for non-participants raise NOT_PARTICIPANT."""
        assert _code(lambda: running.update_score("123456", "kim", 1)) == ErrorCode.NOT_PARTICIPANT

    def test_finalize_once(self, running):
        """The first finalize writes; later calls are no-ops."""
        rewards = {"host": {"points": 50, "exp": 100}}
        assert running.finalize_results("123456", {"host": 9, "gil": 3}, ["host"], False, rewards)
        battle = running.get_battle("123456")
        assert battle.status == BattleStatus.COMPLETED
        assert battle.is_synced
        assert battle.winner_ids == ["host"]

        assert running.finalize_results(
            "123456", {"host": 0, "gil": 12}, ["gil"], False, {"gil": {"points": 50, "exp": 100}}
        ) is False
        rows = {p.user_id: p for p in running.list_participants("123456")}
        assert rows["host"].points_earned == 50
        assert rows["gil"].points_earned == 0
        assert rows["gil"].score == 3

    def test_finalize_rejects_waiting(self, store):
        """Only in_progress or completed battles can be finalized."""
        _create(store)
        assert _code(lambda: store.finalize_results("123456", {}, [], False, {})) == \
            ErrorCode.INVALID_STATUS


class TestHousekeeping:
    """Status changes, stale search and active codes."""

    def test_set_status(self, store):
        """set_status writes through and stamps completion."""
        _create(store)
        battle = store.set_status("123456", BattleStatus.COMPLETED)
        assert battle.status == BattleStatus.COMPLETED
        assert battle.completed_at is not None

    def test_active_codes(self, store):
        """Only waiting and in_progress battles hold their code."""
        _create(store, "111111")
        _create(store, "222222")
        store.set_status("222222", BattleStatus.CANCELLED)
        assert store.active_join_codes() == ["111111"]

    def test_find_stale(self, store, clock):
        """Old waiting battles are stale; fresh ones are not."""
        _create(store, "111111")
        clock.now += timedelta(minutes=45)
        _create(store, "222222")
        stale = store.find_stale_battles(
            waiting_before=clock.now - timedelta(minutes=30),
            in_progress_before=clock.now - timedelta(hours=2),
        )
        assert [b.join_code for b in stale] == ["111111"]


class TestSqliteSpecifics:
    """Behaviour only the SQL backend has."""

    def test_code_reuse_reads_latest(self, db_path):
        """A reused join code resolves to the newest battle."""
        store = SqliteBattleStore(db_path)
        first = _create(store, "333333")
        store.set_status("333333", BattleStatus.CANCELLED)
        second = _create(store, "333333")
        assert second.battle_id != first.battle_id
        assert store.get_battle("333333").status == BattleStatus.WAITING

    def test_missing_schema_is_store_error(self):
        """Queries against an uninitialised file raise StoreError."""
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        try:
            with pytest.raises(StoreError):
                SqliteBattleStore(path).get_battle("123456")
        finally:
            os.unlink(path)
