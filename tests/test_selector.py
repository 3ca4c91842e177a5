# Area: Selection Tests
"""Tests for question selection modes and pool eligibility."""

import random

import pytest

from quiz_battle._selection import (
    SelectionMode,
    clamp_count,
    is_adaptive_eligible,
    select_questions,
    selection_report,
)


def _q(name, difficulty):
    return {"type": "Fill in the blanks", "question": name, "difficulty": difficulty, "answer": name}


@pytest.fixture
def mixed_pool():
    """4 easy, 6 medium, 2 hard, interleaved."""
    pool = []
    pool += [_q(f"e{n}", "easy") for n in range(2)]
    pool += [_q(f"m{n}", "medium") for n in range(3)]
    pool += [_q("h0", "hard")]
    pool += [_q(f"e{n}", "easy") for n in range(2, 4)]
    pool += [_q(f"m{n}", "medium") for n in range(3, 6)]
    pool += [_q("h1", "hard")]
    return pool


def _names(questions):
    return [q["question"] for q in questions]


class TestNormalMode:
    """Pool order is preserved."""

    def test_takes_first_n(self, mixed_pool):
        """Normal mode is a prefix of the pool."""
        assert _names(select_questions(mixed_pool, "normal", 3)) == ["e0", "e1", "m0"]

    def test_invalid_questions_are_skipped(self, mixed_pool):
        """Invalid entries are dropped before selection."""
        pool = [{"type": "Essay"}] + mixed_pool
        assert _names(select_questions(pool, SelectionMode.NORMAL, 1)) == ["e0"]

    def test_unknown_mode_falls_back(self, mixed_pool):
        """An unrecognized mode behaves like normal."""
        assert _names(select_questions(mixed_pool, "chaos", 2)) == ["e0", "e1"]

    def test_count_larger_than_pool(self, mixed_pool):
        """Never returns more than the valid pool."""
        assert len(select_questions(mixed_pool, "normal", 50)) == 12


class TestCasualMode:
    """Shuffled selection."""

    def test_seeded_shuffle_is_reproducible(self, mixed_pool):
        """The same seed gives the same order."""
        first = select_questions(mixed_pool, "casual", 12, random.Random(3))
        second = select_questions(mixed_pool, "casual", 12, random.Random(3))
        assert _names(first) == _names(second)
        assert sorted(_names(first)) == sorted(_names(mixed_pool))

    def test_no_duplicates(self, mixed_pool):
        """Each question is selected at most once."""
        selected = _names(select_questions(mixed_pool, "casual", 8, random.Random(1)))
        assert len(set(selected)) == 8


class TestAdaptiveMode:
    """Medium first, then easy, then hard."""

    def test_eight_of_mixed_pool(self, mixed_pool):
        """6 medium then the first 2 easy, pool order inside buckets."""
        selected = select_questions(mixed_pool, "adaptive", 8)
        assert _names(selected) == ["m0", "m1", "m2", "m3", "m4", "m5", "e0", "e1"]

    def test_hard_only_after_easy(self, mixed_pool):
        """Hard questions come last."""
        selected = select_questions(mixed_pool, "adaptive", 11)
        assert _names(selected)[-1] == "h0"

    def test_bucket_counts_never_exceeded(self, mixed_pool):
        """Each difficulty contributes at most what the pool holds."""
        selected = select_questions(mixed_pool, "adaptive", 12)
        levels = [q["difficulty"] for q in selected]
        assert levels.count("medium") == 6
        assert levels.count("easy") == 4
        assert levels.count("hard") == 2


class TestSelectionReport:
    """Pool summary."""

    def test_report_counts(self, mixed_pool):
        """Rejected entries are listed by index."""
        report = selection_report(mixed_pool + [{"type": "Essay", "question": "?"}])
        assert report.total == 13
        assert report.valid == 12
        assert list(report.rejected) == [12]
        assert report.buckets == {"easy": 4, "medium": 6, "hard": 2}
        assert report.shrunk is True


class TestEligibility:
    """Caller-side clamping and adaptive eligibility."""

    @pytest.mark.parametrize("requested,available,minimum,reserve,expected", [
        (10, 12, 1, 0, 10),
        (20, 12, 1, 0, 12),
        (0, 12, 1, 0, 1),
        (5, 12, 1, 10, 2),
        (5, 0, 1, 0, 0),
        (5, 3, 4, 0, 3),
    ])
    def test_clamp_count(self, requested, available, minimum, reserve, expected):
        """Result lies in [minimum, available - reserve], upper bound winning."""
        assert clamp_count(requested, available, minimum, reserve) == expected

    def test_adaptive_needs_mixed_pool(self, mixed_pool):
        """A large mixed pool qualifies."""
        assert is_adaptive_eligible(mixed_pool) is True

    def test_single_difficulty_is_ineligible(self):
        """All-medium pools do not qualify."""
        assert is_adaptive_eligible([_q(str(n), "medium") for n in range(8)]) is False

    def test_small_pool_is_ineligible(self, mixed_pool):
        """Fewer than the minimum valid questions."""
        assert is_adaptive_eligible(mixed_pool[:4]) is False
