# Area: Battle
"""
quiz_battle._battle.session — Caller-owned client state
=======================================================

A ClientSession holds everything one client knows about itself: which
screen it is on, which battle it is in, whether it hosts it, how far it
got through the questions. The caller creates it and passes it into the
orchestrator; the orchestrator updates it as operations succeed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set

from .models import BattleResult


class ClientView(Enum):
    """
    Screen a client is on.

    State transitions:
    HOME -> LOBBY (create or join)
    LOBBY -> BATTLE (start)
    BATTLE -> RESULTS (complete)
    any -> HOME (leave, cancel, lobby expiry)
    """
    HOME = "home"
    LOBBY = "lobby"
    BATTLE = "battle"
    RESULTS = "results"


@dataclass
class ClientSession:
    """
    Explicit state of one client.

    Attributes:
        user_id: Authenticated user id
        display_name: Name shown to other players
        view: Current screen
        join_code: Battle the client is in, if any
        is_host: True if this client created the battle
        question_index: Next question to answer
        local_score: Score accumulated by this client
        dirty: True while a local change has not been confirmed by the stores
        last_result: Partial result kept for the results screen fallback
    """

    user_id: str
    display_name: str
    avatar: Optional[str] = None
    view: ClientView = ClientView.HOME
    join_code: Optional[str] = None
    is_host: bool = False
    question_index: int = 0
    local_score: int = 0
    dirty: bool = False
    answered: Set[int] = field(default_factory=set)
    last_result: Optional[BattleResult] = None

    @property
    def in_battle(self) -> bool:
        return self.join_code is not None

    def enter_lobby(self, join_code: str, is_host: bool) -> None:
        self.join_code = join_code
        self.is_host = is_host
        self.view = ClientView.LOBBY
        self.question_index = 0
        self.local_score = 0
        self.answered = set()
        self.last_result = None
        self.dirty = False

    def enter_battle(self) -> None:
        self.view = ClientView.BATTLE
        self.question_index = 0
        self.local_score = 0
        self.answered = set()

    def record_answer(self, question_index: int, credit: int) -> None:
        self.answered.add(question_index)
        self.local_score += credit
        self.question_index = question_index + 1

    def show_results(self, result: BattleResult) -> None:
        self.last_result = result
        self.view = ClientView.RESULTS
        self.dirty = False

    def reset(self) -> None:
        """Back to the home screen, keeping identity."""
        self.view = ClientView.HOME
        self.join_code = None
        self.is_host = False
        self.question_index = 0
        self.local_score = 0
        self.answered = set()
        self.dirty = False
