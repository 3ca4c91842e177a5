# Area: Sync
"""
Dual-store result synchronization.

This package handles:
- Winner, tie and reward computation
- The host's one-time copy of final results into the durable store
- Leaderboard reads with a flagged fallback
"""

from .winners import (
    compute_winners,
    compute_rewards,
    build_result,
    leaderboard_rows,
    result_from_store,
    to_view,
)
from .synchronizer import ResultSynchronizer
from .results_reader import ResultsReader, SOURCE_STORE, SOURCE_FALLBACK

__all__ = [
    "compute_winners",
    "compute_rewards",
    "build_result",
    "leaderboard_rows",
    "result_from_store",
    "to_view",
    "ResultSynchronizer",
    "ResultsReader",
    "SOURCE_STORE",
    "SOURCE_FALLBACK",
]
