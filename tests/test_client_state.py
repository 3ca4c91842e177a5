# Area: Battle Tests
"""Tests for client sessions, the ordered action queue and join codes."""

import random

import pytest

from quiz_battle._battle import ActionQueue, ClientSession, ClientView, generate_join_code
from quiz_battle._battle.models import BattleResult
from quiz_battle.errors import BattleError, ErrorCode


class TestClientSession:
    """Screen transitions and local score."""

    def test_lobby_to_results(self):
        """A session moves through lobby, battle and results."""
        session = ClientSession("u1", "Uma")
        session.enter_lobby("123456", is_host=False)
        assert session.in_battle and session.view == ClientView.LOBBY
        session.enter_battle()
        session.record_answer(0, 3)
        session.record_answer(1, 0)
        assert (session.question_index, session.local_score) == (2, 3)
        assert session.answered == {0, 1}
        result = BattleResult(join_code="123456", participants=[])
        session.show_results(result)
        assert session.view == ClientView.RESULTS

    def test_reset_keeps_identity_and_result(self):
        """Reset returns home but keeps who we are and the last result."""
        session = ClientSession("u1", "Uma")
        session.enter_lobby("123456", is_host=True)
        session.last_result = BattleResult(join_code="123456", participants=[])
        session.reset()
        assert session.view == ClientView.HOME
        assert session.join_code is None and session.is_host is False
        assert session.user_id == "u1"
        assert session.last_result is not None


class TestActionQueue:
    """Strict submission order."""

    def test_actions_run_in_order(self):
        """Outcomes come back in the order actions were queued."""
        calls = []
        queue = ActionQueue()
        queue.enqueue("ready", calls.append, "ready")
        queue.enqueue("answer", lambda i, value: calls.append((i, value)) or i, 0, value="A")
        assert len(queue) == 2
        outcomes = queue.drain()
        assert calls == ["ready", (0, "A")]
        assert [o.name for o in outcomes] == ["ready", "answer"]
        assert outcomes[1].value == 0
        assert len(queue) == 0

    def test_rejection_does_not_stop_the_queue(self):
        """A BattleError is captured and the next action still runs."""
        def reject():
            raise BattleError(ErrorCode.INVALID_STATUS)

        queue = ActionQueue()
        queue.enqueue("start", reject)
        queue.enqueue("leave", lambda: "left")
        outcomes = queue.drain()
        assert outcomes[0].ok is False
        assert outcomes[0].error.code == ErrorCode.INVALID_STATUS
        assert outcomes[1].value == "left"
        assert len(queue.history) == 2

    def test_unexpected_errors_propagate(self):
        """Programming errors stop the drain and keep the rest queued."""
        def crash():
            raise KeyError("bug")

        queue = ActionQueue()
        queue.enqueue("crash", crash)
        queue.enqueue("later", lambda: None)
        with pytest.raises(KeyError):
            queue.drain()
        assert len(queue) == 1
        queue.clear()
        assert len(queue) == 0


class TestJoinCode:
    """Join code generation."""

    def test_six_digits(self):
        """Codes are six numeric characters."""
        code = generate_join_code(rng=random.Random(1))
        assert len(code) == 6 and code.isdigit() and code[0] != "0"

    def test_avoids_active_codes(self):
        """A code already in use is never returned."""
        taken = generate_join_code(rng=random.Random(9))
        assert generate_join_code([taken], rng=random.Random(9)) != taken

    def test_exhaustion(self):
        """Running out of attempts raises."""
        class Stuck(random.Random):
            def randint(self, a, b):
                return 123456

        with pytest.raises(RuntimeError):
            generate_join_code(["123456"], rng=Stuck(), max_attempts=3)
