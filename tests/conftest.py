# Area: Test Fixtures
"""Shared fixtures for battle engine tests."""

import logging
import random
from types import SimpleNamespace

import pytest

from quiz_battle._battle.lobby_timer import DeadlineTracker
from quiz_battle._battle.orchestrator import BattleOrchestrator
from quiz_battle._battle.session import ClientSession
from quiz_battle._shared import disable_quiet_mode
from quiz_battle._storage import InMemoryBattleStore, InMemoryPresenceStore, InMemoryQuizSource
from quiz_battle._sync import ResultSynchronizer
from quiz_battle.config import BattleConfig


def mc(prompt="Pick one", answer="A", difficulty="medium", **extra):
    """Build a multiple choice question."""
    question = {
        "type": "Multiple Choice",
        "question": prompt,
        "difficulty": difficulty,
        "choices": ["A", "B", "C"],
        "correctAnswer": answer,
    }
    question.update(extra)
    return question


class FakeClock:
    """Manually advanced clock usable as both time.time and time.monotonic."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging side effects so caplog keeps working."""
    yield
    pkg_logger = logging.getLogger("quiz_battle")
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
    disable_quiet_mode()


@pytest.fixture
def battle_quiz():
    return {
        "title": "Capitals",
        "questions": [mc(f"Question {n}") for n in range(1, 4)],
    }


@pytest.fixture
def env(battle_quiz):
    """In-memory stores wired to an orchestrator with a fake clock."""
    config = BattleConfig(min_players=2, max_players=4, lobby_timeout_seconds=60,
                          question_time_limit_seconds=10)
    clock = FakeClock()
    durable = InMemoryBattleStore()
    presence = InMemoryPresenceStore()
    quizzes = InMemoryQuizSource({1: battle_quiz})
    sleeps = []
    synchronizer = ResultSynchronizer(durable, presence, config, sleep=sleeps.append)
    orchestrator = BattleOrchestrator(
        durable, presence, quizzes,
        config=config,
        synchronizer=synchronizer,
        timer=DeadlineTracker(clock=clock),
        rng=random.Random(7),
        clock=clock,
    )
    return SimpleNamespace(
        config=config, clock=clock, durable=durable, presence=presence,
        quizzes=quizzes, orchestrator=orchestrator, synchronizer=synchronizer,
        sleeps=sleeps,
    )


@pytest.fixture
def host():
    return ClientSession(user_id="host", display_name="Hana")


@pytest.fixture
def guest():
    return ClientSession(user_id="guest", display_name="Gil")


@pytest.fixture
def lobby(env, host, guest):
    """A waiting battle with host and guest, both ready."""
    env.orchestrator.create(host, 1)
    env.orchestrator.join(guest, host.join_code)
    env.orchestrator.ready(host)
    env.orchestrator.ready(guest)
    return host.join_code


@pytest.fixture
def started(env, host, guest, lobby):
    """An in-progress battle; returns the selected questions."""
    questions = env.orchestrator.start(host)
    guest.enter_battle()
    return questions
