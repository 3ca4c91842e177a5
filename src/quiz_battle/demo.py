# Area: Shared
"""
quiz_battle.demo — In-memory demo battle
========================================

Runs a whole battle against the in-memory stores: a host and a few
bot players join, ready up, answer every question, and the host syncs
results. Bots answer correctly with a fixed probability so runs with
the same seed are reproducible.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from ._battle.orchestrator import BattleOrchestrator
from ._battle.session import ClientSession
from ._shared.questions import QuestionType, get_field, parse_question_type
from ._storage import InMemoryBattleStore, InMemoryPresenceStore, InMemoryQuizSource
from ._sync import ResultsReader
from .config import BattleConfig
from .types import ResultsView

logger = logging.getLogger("quiz_battle.demo")

DEMO_QUIZ_ID = 1

SAMPLE_QUIZ: Dict[str, Any] = {
    "title": "Science Basics",
    "questions": [
        {"type": "Multiple Choice", "question": "What is the chemical symbol for gold?",
         "difficulty": "easy", "choices": ["Ag", "Au", "Gd", "Go"], "correctAnswer": "Au"},
        {"type": "True/False", "question": "Sound travels faster than light.",
         "difficulty": "easy", "correctAnswer": "False"},
        {"type": "Fill in the blanks", "question": "Water boils at ___ degrees Celsius at sea level.",
         "difficulty": "medium", "answer": "100|one hundred"},
        {"type": "Matching", "question": "Match each element to its symbol.",
         "difficulty": "hard",
         "matchingPairs": [
             {"left": "Hydrogen", "right": "H"},
             {"left": "Oxygen", "right": "O"},
             {"left": "Sodium", "right": "Na"},
             {"left": "Iron", "right": "Fe"},
         ]},
        {"type": "Multiple Choice", "question": "Which planet is known as the Red Planet?",
         "difficulty": "medium", "choices": ["Venus", "Mars", "Jupiter"], "correctAnswer": "Mars"},
        {"type": "Fill in the blanks", "question": "The powerhouse of the cell is the ___.",
         "difficulty": "medium", "answer": "mitochondria",
         "alternativeAnswers": ["mitochondrion"]},
    ],
}


def bot_answer(question: Dict[str, Any], skill: float, rng: random.Random) -> Any:
    """Answer a question correctly with probability ``skill``."""
    qtype = parse_question_type(question.get("type"))
    correct = rng.random() < skill

    if qtype is QuestionType.MATCHING:
        pairs = [(p["left"], p["right"]) for p in get_field(question, "matchingPairs")]
        if correct:
            return pairs
        keep = rng.randint(0, len(pairs))
        return pairs[:keep] + [(left, "?") for left, _ in pairs[keep:]]

    if qtype is QuestionType.FILL_IN_BLANK:
        primary = str(get_field(question, "answer") or "").split("|")[0]
        return primary.upper() if correct else "no idea"

    key = get_field(question, "correctAnswer")
    if correct:
        return key
    wrong = [c for c in question.get("choices") or ["True", "False"] if c != key]
    return rng.choice(wrong) if wrong else ""


def run_demo_battle(
    players: int = 3,
    mode: str = "normal",
    seed: Optional[int] = None,
    config: Optional[BattleConfig] = None,
) -> ResultsView:
    """
    Play one battle end to end and return the leaderboard.

    Args:
        players: Number of participants including the host
        mode: Question selection mode
        seed: Random seed for selection and bot answers
        config: Battle configuration (sleeps are skipped in the demo)
    """
    rng = random.Random(seed)
    config = config or BattleConfig()
    durable = InMemoryBattleStore()
    presence = InMemoryPresenceStore()
    quizzes = InMemoryQuizSource({DEMO_QUIZ_ID: SAMPLE_QUIZ})
    orchestrator = BattleOrchestrator(durable, presence, quizzes, config=config, rng=rng)

    host = ClientSession(user_id="host", display_name="Host")
    orchestrator.create(host, DEMO_QUIZ_ID)
    sessions: List[ClientSession] = [host]
    for n in range(1, players):
        guest = ClientSession(user_id=f"bot{n}", display_name=f"Bot {n}")
        orchestrator.join(guest, host.join_code)
        sessions.append(guest)

    for session in sessions:
        orchestrator.ready(session)
    questions = orchestrator.start(host, mode=mode)

    skills = {s.user_id: rng.uniform(0.4, 0.95) for s in sessions}
    for session in sessions:
        if session is not host:
            session.enter_battle()
        for index, question in enumerate(questions):
            orchestrator.submit_answer(
                session, index, bot_answer(question, skills[session.user_id], rng)
            )

    orchestrator.complete(host)
    reader = ResultsReader(durable, config, sleep=lambda _s: None)
    view = reader.read(host.join_code, fallback=host.last_result, is_host=True)
    logger.info(f"Demo battle {host.join_code} finished ({view['source']})")
    return view
