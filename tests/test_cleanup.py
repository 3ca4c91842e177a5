# Area: Battle Tests
"""Tests for the abandoned battle sweep."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from quiz_battle._battle.cleanup import BattleCleaner
from quiz_battle._battle.enums import BattleStatus
from quiz_battle._battle.stores import battle_path, metadata_path
from quiz_battle._storage import InMemoryBattleStore, InMemoryPresenceStore
from quiz_battle.config import BattleConfig
from quiz_battle.errors import StoreError

CREATED = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def stores():
    durable = InMemoryBattleStore(now=lambda: CREATED)
    presence = InMemoryPresenceStore()
    for code in ("111111", "222222", "333333"):
        durable.create_battle(1, "host", "Hana", code, total_questions=3, max_players=4)
        presence.set(metadata_path(code), {"status": "waiting"})
    durable.set_status("222222", BattleStatus.IN_PROGRESS)
    durable.set_status("333333", BattleStatus.COMPLETED)
    return durable, presence


def cleaner_at(stores, when):
    durable, presence = stores
    return BattleCleaner(durable, presence, BattleConfig(), now=lambda: when)


class TestBattleCleaner:
    """Stale waiting and in-progress battles are cancelled."""

    def test_nothing_stale_yet(self, stores):
        """Fresh battles are left alone."""
        assert cleaner_at(stores, CREATED + timedelta(minutes=5)).run() == []

    def test_stale_waiting_cancelled(self, stores):
        """A lobby past the waiting cutoff is cancelled and its room dropped."""
        durable, presence = stores
        cancelled = cleaner_at(stores, CREATED + timedelta(minutes=31)).run()
        assert cancelled == ["111111"]
        assert durable.get_battle("111111").status == BattleStatus.CANCELLED
        assert presence.get(battle_path("111111")) is None
        assert durable.get_battle("222222").status == BattleStatus.IN_PROGRESS

    def test_stale_in_progress_cancelled(self, stores):
        """Past both cutoffs, waiting and in-progress battles go; completed stay."""
        durable, _ = stores
        cancelled = cleaner_at(stores, CREATED + timedelta(hours=3)).run()
        assert sorted(cancelled) == ["111111", "222222"]
        assert durable.get_battle("333333").status == BattleStatus.COMPLETED

    def test_store_failure_skipped(self, stores):
        """A battle that cannot be cancelled keeps its room; the sweep goes on."""
        durable, presence = stores
        real = durable.set_status

        def flaky(join_code, status):
            if join_code == "111111":
                raise StoreError("set_status", "locked")
            return real(join_code, status)

        with patch.object(durable, "set_status", side_effect=flaky):
            cancelled = cleaner_at(stores, CREATED + timedelta(hours=3)).run()
        assert cancelled == ["222222"]
        assert presence.get(metadata_path("111111")) == {"status": "waiting"}
