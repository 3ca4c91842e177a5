# Area: Sync
"""
quiz_battle._sync.synchronizer — Ephemeral to durable result sync
=================================================================

Copies final scores, winners and rewards from the ephemeral store into
the durable store once a battle has completed. Only the host runs it.
Running it again on an already synced battle changes nothing.

Durable write failures are retried with exponential backoff; when
every attempt fails the sync raises SyncFailedError and the client
shows its own partial result instead.
"""

from __future__ import annotations
import logging
import time
from typing import Callable, Dict, Optional

from .._battle.enums import BattleStatus
from .._battle.models import BattleResult
from .._battle.readiness import scores_from_snapshot
from .._battle.stores import DurableBattleStore, PresenceStore, metadata_path, players_path
from .._shared.retry import RetryExhausted, retry_call
from ..config import BattleConfig
from ..errors import BattleError, ErrorCode, StoreError, SyncFailedError
from .winners import build_result, result_from_store

logger = logging.getLogger("quiz_battle.sync")


class ResultSynchronizer:
    """
    Host-side result sync for completed battles.

    Attributes:
        durable: Store of record
        presence: Ephemeral store holding live scores
        config: Rewards and retry settings
    """

    def __init__(
        self,
        durable: DurableBattleStore,
        presence: PresenceStore,
        config: Optional[BattleConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.durable = durable
        self.presence = presence
        self.config = config or BattleConfig()
        self._sleep = sleep

    def sync(self, join_code: str, caller_id: str) -> BattleResult:
        """
        Write final results for a completed battle.

        Args:
            join_code: Battle to sync
            caller_id: User running the sync (must be the host)

        Returns:
            The BattleResult now held by the durable store

        Raises:
            BattleError: NOT_FOUND, NOT_HOST or INVALID_STATUS
            SyncFailedError: If the durable write kept failing
        """
        battle = self.durable.get_battle(join_code)
        if battle is None:
            raise BattleError(ErrorCode.NOT_FOUND, join_code=join_code,
                              details={"operation": "sync"})
        if battle.host_id != caller_id:
            raise BattleError(ErrorCode.NOT_HOST, "Only the host can sync results",
                              join_code=join_code, details={"operation": "sync"})

        participants = self.durable.list_participants(join_code)
        if battle.is_synced:
            logger.info(f"[{join_code}] Results already synced, nothing to do")
            return result_from_store(battle, participants)

        if battle.status not in (BattleStatus.IN_PROGRESS, BattleStatus.COMPLETED):
            raise BattleError(
                ErrorCode.INVALID_STATUS,
                f"Cannot sync a battle that is {battle.status.value}",
                join_code=join_code,
                details={"operation": "sync", "status": battle.status.value},
            )

        metadata = self.presence.get(metadata_path(join_code))
        if metadata is not None and metadata.get("status") != BattleStatus.COMPLETED.value:
            raise BattleError(
                ErrorCode.INVALID_STATUS,
                "Battle has not completed yet",
                join_code=join_code,
                details={"operation": "sync", "status": metadata.get("status")},
            )

        snapshot = self.presence.get(players_path(join_code)) or {}
        live_scores = scores_from_snapshot(snapshot)
        forfeited = [uid for uid, rec in snapshot.items()
                     if isinstance(rec, dict) and rec.get("forfeited")]
        result = build_result(
            join_code,
            participants,
            live_scores,
            points=self.config.winner_points,
            exp=self.config.winner_exp,
            forfeited=forfeited,
            quiz_title=battle.quiz_title,
        )
        scores: Dict[str, int] = {p.user_id: p.score for p in result.participants}
        rewards = {
            p.user_id: {"points": p.points_earned, "exp": p.exp_earned}
            for p in result.participants if p.is_winner
        }

        try:
            wrote = retry_call(
                lambda: self.durable.finalize_results(
                    join_code, scores, result.winner_ids, result.is_tie, rewards
                ),
                attempts=self.config.sync_max_attempts,
                base_delay=self.config.sync_backoff_seconds,
                retry_on=(StoreError,),
                sleep=self._sleep,
                label=f"[{join_code}] finalize_results",
            )
        except RetryExhausted as e:
            raise SyncFailedError(join_code, e.attempts, e.last_error) from e

        if metadata is not None:
            self.presence.update(metadata_path(join_code), {"synced": True})

        if wrote:
            logger.info(
                f"[{join_code}] Results synced: winners={result.winner_ids} tie={result.is_tie}"
            )
        else:
            logger.info(f"[{join_code}] Results were synced concurrently, nothing written")
        return result
