# Area: Storage
"""
quiz_battle._storage.sqlite_store — SQLite durable battle store
===============================================================

Repository for the battles and battle_participants tables. Join and
start guards run inside a single write transaction so concurrent
clients cannot overfill a battle or start it twice.
"""

from __future__ import annotations
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .._battle.enums import BattleStatus
from .._battle.models import Battle, Participant
from .._battle.stores import DurableBattleStore
from ..errors import BattleError, ErrorCode
from .database import BaseRepository

logger = logging.getLogger("quiz_battle.storage.sqlite")

_BATTLE_BY_CODE = "SELECT * FROM battles WHERE join_code = ? ORDER BY battle_id DESC LIMIT 1"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_participant(row: Dict[str, Any]) -> Participant:
    return Participant(
        user_id=row["user_id"],
        display_name=row["display_name"],
        avatar=row["avatar"],
        score=row["score"],
        is_host=bool(row["is_host"]),
        is_winner=bool(row["is_winner"]),
        points_earned=row["points_earned"],
        exp_earned=row["exp_earned"],
        forfeited=bool(row["forfeited"]),
        joined_at=_parse_ts(row["joined_at"]),
    )


class SqliteBattleStore(BaseRepository, DurableBattleStore):
    """
    Durable store backed by SQLite.

    Call ``init_database(db_path)`` once before use.
    """

    def __init__(self, db_path: str = "quiz_battle.db", now: Callable[[], datetime] = _utcnow):
        super().__init__(db_path)
        self._now = now

    def _ts(self) -> str:
        return self._now().isoformat()

    # ── Row mapping ──────────────────────────────────────────

    def _to_battle(self, row: Dict[str, Any], winner_ids: List[str]) -> Battle:
        return Battle(
            battle_id=row["battle_id"],
            join_code=row["join_code"],
            quiz_id=row["quiz_id"],
            host_id=row["host_id"],
            status=BattleStatus(row["status"]),
            total_questions=row["total_questions"],
            max_players=row["max_players"],
            quiz_title=row["quiz_title"],
            created_at=_parse_ts(row["created_at"]),
            started_at=_parse_ts(row["started_at"]),
            completed_at=_parse_ts(row["completed_at"]),
            synced_at=_parse_ts(row["synced_at"]),
            is_tie=bool(row["is_tie"]),
            winner_ids=winner_ids,
        )

    def _locked_battle(self, conn: sqlite3.Connection, join_code: str) -> Dict[str, Any]:
        row = conn.execute(_BATTLE_BY_CODE, (join_code,)).fetchone()
        if row is None:
            raise BattleError(ErrorCode.NOT_FOUND, join_code=join_code)
        return dict(row)

    @staticmethod
    def _count(conn: sqlite3.Connection, battle_id: int) -> int:
        return conn.execute(
            "SELECT COUNT(*) FROM battle_participants WHERE battle_id = ?", (battle_id,)
        ).fetchone()[0]

    # ── DurableBattleStore ───────────────────────────────────

    def create_battle(
        self,
        quiz_id: int,
        host_id: str,
        host_name: str,
        join_code: str,
        total_questions: int,
        max_players: int,
        quiz_title: Optional[str] = None,
    ) -> Battle:
        now = self._ts()
        with self._transaction("create_battle") as conn:
            cursor = conn.execute(
                """
                INSERT INTO battles
                (join_code, quiz_id, quiz_title, host_id, status,
                 total_questions, max_players, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (join_code, quiz_id, quiz_title, host_id, BattleStatus.WAITING.value,
                 total_questions, max_players, now),
            )
            conn.execute(
                """
                INSERT INTO battle_participants
                (battle_id, user_id, display_name, is_host, joined_at)
                VALUES (?, ?, ?, 1, ?)
                """,
                (cursor.lastrowid, host_id, host_name, now),
            )
        return self.get_battle(join_code)

    def get_battle(self, join_code: str) -> Optional[Battle]:
        row = self._execute_one(_BATTLE_BY_CODE, (join_code,))
        if row is None:
            return None
        winners = self._execute(
            """
            SELECT user_id FROM battle_participants
            WHERE battle_id = ? AND is_winner = 1 ORDER BY joined_at, rowid
            """,
            (row["battle_id"],),
            fetch=True,
        ) or []
        return self._to_battle(row, [w["user_id"] for w in winners])

    def add_participant(
        self, join_code: str, user_id: str, display_name: str, avatar: Optional[str] = None
    ) -> Participant:
        with self._transaction("add_participant") as conn:
            battle = self._locked_battle(conn, join_code)
            if battle["status"] != BattleStatus.WAITING.value:
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "join", "status": battle["status"]},
                )
            existing = conn.execute(
                "SELECT * FROM battle_participants WHERE battle_id = ? AND user_id = ?",
                (battle["battle_id"], user_id),
            ).fetchone()
            if existing is not None:
                return _row_to_participant(dict(existing))
            count = self._count(conn, battle["battle_id"])
            if count >= battle["max_players"]:
                raise BattleError(
                    ErrorCode.TOO_MANY_PLAYERS, join_code=join_code,
                    details={"operation": "join", "max_players": battle["max_players"],
                             "player_count": count},
                )
            now = self._ts()
            conn.execute(
                """
                INSERT INTO battle_participants
                (battle_id, user_id, display_name, avatar, joined_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (battle["battle_id"], user_id, display_name, avatar, now),
            )
        return Participant(
            user_id=user_id, display_name=display_name, avatar=avatar,
            joined_at=_parse_ts(now),
        )

    def remove_participant(self, join_code: str, user_id: str) -> None:
        with self._transaction("remove_participant") as conn:
            battle = self._locked_battle(conn, join_code)
            if battle["status"] != BattleStatus.WAITING.value:
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "leave", "status": battle["status"]},
                )
            conn.execute(
                "DELETE FROM battle_participants WHERE battle_id = ? AND user_id = ?",
                (battle["battle_id"], user_id),
            )

    def list_participants(self, join_code: str) -> List[Participant]:
        rows = self._execute(
            """
            SELECT p.* FROM battle_participants p
            WHERE p.battle_id = (
                SELECT battle_id FROM battles WHERE join_code = ?
                ORDER BY battle_id DESC LIMIT 1
            )
            ORDER BY p.joined_at, p.rowid
            """,
            (join_code,),
            fetch=True,
        ) or []
        return [_row_to_participant(r) for r in rows]

    def start_battle(
        self, join_code: str, caller_id: str, expected_participants: int,
        min_players: int, total_questions: int,
    ) -> Battle:
        with self._transaction("start_battle") as conn:
            battle = self._locked_battle(conn, join_code)
            if battle["host_id"] != caller_id:
                raise BattleError(
                    ErrorCode.NOT_HOST, join_code=join_code,
                    details={"operation": "start", "caller": caller_id},
                )
            if battle["status"] != BattleStatus.WAITING.value:
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "start", "status": battle["status"]},
                )
            count = self._count(conn, battle["battle_id"])
            if count < min_players:
                raise BattleError(
                    ErrorCode.NOT_ENOUGH_PLAYERS, join_code=join_code,
                    details={"operation": "start", "min_players": min_players,
                             "player_count": count},
                )
            if count != expected_participants:
                raise BattleError(
                    ErrorCode.NOT_ENOUGH_PLAYERS,
                    "Players changed while starting",
                    join_code=join_code,
                    details={"operation": "start", "reason": "participants_changed",
                             "player_count": count, "expected": expected_participants},
                )
            conn.execute(
                """
                UPDATE battles SET status = ?, started_at = ?, total_questions = ?
                WHERE battle_id = ?
                """,
                (BattleStatus.IN_PROGRESS.value, self._ts(), total_questions,
                 battle["battle_id"]),
            )
        logger.info(f"[{join_code}] Durable status: waiting → in_progress")
        return self.get_battle(join_code)

    def _update_participant(
        self, operation: str, join_code: str, user_id: str, assignment: str, params: tuple
    ) -> None:
        with self._transaction(operation) as conn:
            battle = self._locked_battle(conn, join_code)
            cursor = conn.execute(
                f"UPDATE battle_participants SET {assignment} WHERE battle_id = ? AND user_id = ?",
                params + (battle["battle_id"], user_id),
            )
            if cursor.rowcount == 0:
                raise BattleError(
                    ErrorCode.NOT_PARTICIPANT, join_code=join_code,
                    details={"operation": operation, "user_id": user_id},
                )

    def update_score(self, join_code: str, user_id: str, score: int) -> None:
        self._update_participant("update_score", join_code, user_id, "score = ?", (score,))

    def mark_forfeited(self, join_code: str, user_id: str) -> None:
        self._update_participant("mark_forfeited", join_code, user_id, "forfeited = 1", ())

    def set_status(self, join_code: str, status: BattleStatus) -> Battle:
        with self._transaction("set_status") as conn:
            battle = self._locked_battle(conn, join_code)
            completed_at = self._ts() if status == BattleStatus.COMPLETED else battle["completed_at"]
            conn.execute(
                "UPDATE battles SET status = ?, completed_at = ? WHERE battle_id = ?",
                (status.value, completed_at, battle["battle_id"]),
            )
        logger.info(f"[{join_code}] Durable status: {battle['status']} → {status.value}")
        return self.get_battle(join_code)

    def finalize_results(
        self,
        join_code: str,
        scores: Dict[str, int],
        winner_ids: List[str],
        is_tie: bool,
        rewards: Dict[str, Dict[str, int]],
    ) -> bool:
        with self._transaction("finalize_results") as conn:
            battle = self._locked_battle(conn, join_code)
            if battle["synced_at"] is not None:
                return False
            if battle["status"] not in (BattleStatus.IN_PROGRESS.value, BattleStatus.COMPLETED.value):
                raise BattleError(
                    ErrorCode.INVALID_STATUS, join_code=join_code,
                    details={"operation": "sync", "status": battle["status"]},
                )
            winners = set(winner_ids)
            for user_id, score in scores.items():
                reward = rewards.get(user_id, {})
                conn.execute(
                    """
                    UPDATE battle_participants
                    SET score = ?, is_winner = ?, points_earned = ?, exp_earned = ?
                    WHERE battle_id = ? AND user_id = ?
                    """,
                    (score, int(user_id in winners), reward.get("points", 0),
                     reward.get("exp", 0), battle["battle_id"], user_id),
                )
            now = self._ts()
            conn.execute(
                """
                UPDATE battles
                SET status = ?, is_tie = ?, completed_at = COALESCE(completed_at, ?),
                    synced_at = ?
                WHERE battle_id = ?
                """,
                (BattleStatus.COMPLETED.value, int(is_tie), now, now, battle["battle_id"]),
            )
        return True

    def find_stale_battles(
        self, waiting_before: datetime, in_progress_before: datetime
    ) -> List[Battle]:
        rows = self._execute(
            """
            SELECT * FROM battles
            WHERE (status = ? AND created_at < ?)
               OR (status = ? AND COALESCE(started_at, created_at) < ?)
            ORDER BY battle_id
            """,
            (BattleStatus.WAITING.value, waiting_before.isoformat(),
             BattleStatus.IN_PROGRESS.value, in_progress_before.isoformat()),
            fetch=True,
        ) or []
        return [self._to_battle(r, []) for r in rows]

    def active_join_codes(self) -> List[str]:
        rows = self._execute(
            "SELECT DISTINCT join_code FROM battles WHERE status IN (?, ?)",
            (BattleStatus.WAITING.value, BattleStatus.IN_PROGRESS.value),
            fetch=True,
        ) or []
        return [r["join_code"] for r in rows]
