"""
quiz_battle.types — TypedDict schemas for question and result payloads
=======================================================================

This module documents the exact structure of the dictionaries that
cross the engine boundary: question payloads as delivered by the quiz
store, grading results, and the leaderboard rows served after a
battle completes.

All types are exported from the main package:

    from quiz_battle import QuestionPayload, GradeResult, ...

Use __annotations__ to inspect fields:

    >>> MatchingPair.__annotations__
    {'left': <class 'str'>, 'right': <class 'str'>}
"""

from typing import List, Optional, TypedDict


# ============================================
# Question payloads
# ============================================

class MatchingPair(TypedDict):
    """One left/right pair of a matching question."""
    left: str               # e.g., "H2O"
    right: str              # e.g., "Water"


class _QuestionBase(TypedDict):
    type: str               # "Multiple Choice", "True/False", "Fill in the blanks", "Matching"
    question: str           # Prompt text


class QuestionPayload(_QuestionBase, total=False):
    """A quiz question as stored by the quiz collaborator.

    Fields
    ------
    type : str
        One of the four question type labels.
    question : str
        Prompt text. Must be non-empty.
    difficulty : str
        "easy", "medium" or "hard". Missing means medium.
    choices : List[str]
        Multiple choice options.
    correctAnswer : str
        Correct choice text, or "True"/"False".
    answer : str
        Fill-in-blank primary answer. May carry alternatives
        separated by "|".
    alternativeAnswers : List[str]
        Extra accepted fill-in-blank answers.
    caseSensitive : bool
        Fill-in-blank case policy. Defaults to False.
    matchingPairs : List[MatchingPair]
        Answer key for matching questions.
    """
    id: int
    difficulty: str
    choices: List[str]
    correctAnswer: str
    answer: str
    alternativeAnswers: List[str]
    caseSensitive: bool
    matchingPairs: List[MatchingPair]


# ============================================
# Grading
# ============================================

class _GradeResultBase(TypedDict):
    is_correct: bool
    partial_credit: int


class GradeResult(_GradeResultBase, total=False):
    """Result of grading one submission.

    Fields
    ------
    is_correct : bool
        True only for a fully correct answer.
    partial_credit : int
        Points earned (0 when wrong).
    accuracy : float
        Fraction of correct pairs. Present for matching questions.
    """
    accuracy: float


class AttemptAnswer(TypedDict):
    """One graded answer inside a solo attempt."""
    question_index: int
    submitted: object
    is_correct: bool
    partial_credit: int


class AttemptPayload(TypedDict):
    """Body sent to the quiz store's submit-attempt endpoint."""
    score: int
    totalQuestions: int
    timeSpent: int
    answers: List[AttemptAnswer]


# ============================================
# Results
# ============================================

class LeaderboardRow(TypedDict):
    """One row of the post-battle leaderboard."""
    rank: int
    user_id: str
    display_name: str
    score: int
    is_winner: bool
    points_earned: int
    exp_earned: int
    forfeited: bool


class ResultsView(TypedDict):
    """What the results screen renders.

    Fields
    ------
    join_code : str
        Battle join code.
    is_tie : bool
        True when more than one participant shares the top score.
    rows : List[LeaderboardRow]
        Participants ordered by score.
    source : str
        "store" for a durable-store read, "fallback" for the partial
        result handed over by the client when the store was unreachable.
    """
    join_code: str
    is_tie: bool
    rows: List[LeaderboardRow]
    source: str
    quiz_title: Optional[str]
