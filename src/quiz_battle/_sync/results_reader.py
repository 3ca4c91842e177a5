# Area: Sync
"""
quiz_battle._sync.results_reader — Post-battle leaderboard reads
================================================================

Leaderboards are read from the durable store only. Non-host clients
first wait a short grace period so the host's sync can land. A failed
or not-yet-synced read is retried once; after that the reader falls
back to the partial result the client was handed when the battle
completed. Fallback views carry ``source="fallback"`` and are logged
at WARNING.
"""

from __future__ import annotations
import logging
import time
from typing import Callable, Optional

from .._battle.models import BattleResult
from .._battle.stores import DurableBattleStore
from ..config import BattleConfig
from ..errors import StoreError
from ..types import ResultsView
from .winners import result_from_store, to_view

logger = logging.getLogger("quiz_battle.sync.reader")

SOURCE_STORE = "store"
SOURCE_FALLBACK = "fallback"

READ_ATTEMPTS = 2


class ResultsReader:
    """Reads final results for the results screen."""

    def __init__(
        self,
        durable: DurableBattleStore,
        config: Optional[BattleConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.durable = durable
        self.config = config or BattleConfig()
        self._sleep = sleep
        self.fallback_count = 0

    def _fetch(self, join_code: str) -> Optional[BattleResult]:
        try:
            battle = self.durable.get_battle(join_code)
            if battle is None or not battle.is_synced:
                return None
            return result_from_store(battle, self.durable.list_participants(join_code))
        except StoreError as e:
            logger.warning(f"[{join_code}] Results read failed: {e}")
            return None

    def read(
        self,
        join_code: str,
        fallback: Optional[BattleResult] = None,
        is_host: bool = False,
    ) -> Optional[ResultsView]:
        """
        Return the results view for a battle.

        Args:
            join_code: Battle to read
            fallback: Partial result handed over at completion
            is_host: Hosts skip the grace wait (they ran the sync)

        Returns:
            A store-backed view, the fallback view, or None when the
            store has nothing and no fallback was given
        """
        if not is_host and self.config.results_grace_seconds > 0:
            self._sleep(self.config.results_grace_seconds)

        for attempt in range(1, READ_ATTEMPTS + 1):
            result = self._fetch(join_code)
            if result is not None:
                return to_view(result, SOURCE_STORE)
            if attempt < READ_ATTEMPTS:
                self._sleep(self.config.results_retry_delay_seconds)

        if fallback is None:
            logger.warning(f"[{join_code}] No stored results and no fallback available")
            return None

        self.fallback_count += 1
        logger.warning(
            f"[{join_code}] Showing fallback results (store unavailable or not synced)",
            extra={"join_code": join_code, "results_source": SOURCE_FALLBACK},
        )
        return to_view(fallback, SOURCE_FALLBACK)
