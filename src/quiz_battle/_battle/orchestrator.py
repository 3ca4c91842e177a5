# Area: Battle
"""
quiz_battle._battle.orchestrator — Battle lifecycle orchestration
=================================================================

Drives a battle through waiting -> in_progress -> completed (or
cancelled) across the two stores:

- the durable store is the system of record for the battle row, the
  participant rows and final scores;
- the presence store holds the live room: metadata, presence records,
  the selected question list and answer submissions.

The two stores are not transactional. ``start`` writes the presence
store first and then the durable store; if the durable write is
rejected the error is raised as HalfAppliedTransitionError and the host
decides between ``rollback_start`` and ``cancel``.

Every client-facing operation takes the caller's ClientSession, which
supplies "who am I" and is updated as operations succeed.
"""

from __future__ import annotations
import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional, Union

from .._grading import grade
from .._selection import (
    SelectionMode,
    clamp_count,
    is_adaptive_eligible,
    select_questions,
    selection_report,
)
from .._sync.synchronizer import ResultSynchronizer
from .._sync.winners import build_result
from ..config import BattleConfig
from ..errors import BattleError, ErrorCode, HalfAppliedTransitionError, StoreError
from ..types import GradeResult
from .enums import BattleEvent, BattleStatus
from .join_code import generate_join_code
from .lobby_timer import PHASE_BATTLE, PHASE_LOBBY, DeadlineTracker
from .models import AnswerSubmission, Battle, BattleResult, Participant, PresenceRecord
from .readiness import Readiness, aggregate_readiness, all_finished, scores_from_snapshot
from .session import ClientSession, ClientView
from .state_machine import BattleStateMachine
from .stores import (
    DurableBattleStore,
    PresenceStore,
    QuizSource,
    all_answers_path,
    answer_path,
    answers_path,
    metadata_path,
    player_path,
    players_path,
    questions_path,
    viewers_path,
)

logger = logging.getLogger("quiz_battle.battle")


class BattleOrchestrator:
    """
    Battle state machine over a durable and an ephemeral store.

    Attributes:
        durable: Store of record
        presence: Ephemeral real-time store
        quizzes: Quiz source used at create and start
        config: Battle limits and timeouts
        synchronizer: Result sync run by the host on completion
        timer: Lobby expiry and battle time budget deadlines
    """

    def __init__(
        self,
        durable: DurableBattleStore,
        presence: PresenceStore,
        quizzes: QuizSource,
        config: Optional[BattleConfig] = None,
        synchronizer: Optional[ResultSynchronizer] = None,
        timer: Optional[DeadlineTracker] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.durable = durable
        self.presence = presence
        self.quizzes = quizzes
        self.config = config or BattleConfig()
        self.synchronizer = synchronizer or ResultSynchronizer(durable, presence, self.config)
        self.timer = timer or DeadlineTracker()
        self.rng = rng or random.Random()
        self._clock = clock

    # ── Lookups ──────────────────────────────────────────────

    def _joined(self, session: ClientSession) -> str:
        if session.join_code is None:
            raise BattleError(ErrorCode.NOT_PARTICIPANT, "You are not in a battle")
        return session.join_code

    def _battle(self, join_code: str) -> Battle:
        battle = self.durable.get_battle(join_code)
        if battle is None:
            raise BattleError(ErrorCode.NOT_FOUND, join_code=join_code)
        return battle

    def _metadata(self, join_code: str) -> Dict[str, Any]:
        metadata = self.presence.get(metadata_path(join_code))
        if metadata is None:
            raise BattleError(ErrorCode.NOT_FOUND, "Battle room not found", join_code=join_code)
        return metadata

    def _require_host(self, session: ClientSession, battle: Battle, operation: str) -> None:
        if battle.host_id != session.user_id:
            raise BattleError(
                ErrorCode.NOT_HOST,
                f"Only the host can {operation} the battle",
                join_code=battle.join_code,
                details={"operation": operation, "caller": session.user_id},
            )

    def _mirror(self, battle: Battle) -> None:
        """Write the minimal battle record into the presence store."""
        self.presence.set(metadata_path(battle.join_code), {
            "battle_id": battle.battle_id,
            "quiz_id": battle.quiz_id,
            "quiz_title": battle.quiz_title,
            "host_id": battle.host_id,
            "status": battle.status.value,
            "total_questions": battle.total_questions,
            "created_at": self._clock(),
            "synced": False,
        })

    def readiness(self, join_code: str) -> Readiness:
        """Readiness recomputed from the current presence snapshot."""
        return aggregate_readiness(self.presence.get(players_path(join_code)))

    def is_complete(self, join_code: str) -> bool:
        metadata = self._metadata(join_code)
        snapshot = self.presence.get(players_path(join_code))
        return all_finished(snapshot, int(metadata.get("total_questions") or 0))

    def time_budget(self, total_questions: int) -> float:
        """Seconds a battle may run before silent players are forfeited."""
        return float(total_questions * self.config.question_time_limit_seconds)

    # ── Lobby ────────────────────────────────────────────────

    def create(
        self, session: ClientSession, quiz_id: int, question_count: Optional[int] = None
    ) -> Battle:
        """
        Create a battle for a quiz with the caller as host.

        Raises:
            BattleError: INVALID_STATUS if the caller is already in a
                battle, QUIZ_DELETED or NO_QUESTIONS
        """
        if session.in_battle:
            raise BattleError(
                ErrorCode.INVALID_STATUS, "Leave your current battle first",
                join_code=session.join_code, details={"operation": "create"},
            )
        quiz = self.quizzes.get_quiz(quiz_id)
        if quiz is None:
            raise BattleError(ErrorCode.QUIZ_DELETED, details={"quiz_id": quiz_id})

        report = selection_report(quiz.get("questions") or [])
        total = clamp_count(
            question_count or report.valid,
            report.valid,
            minimum=self.config.min_selectable,
            reserve=self.config.selection_reserve,
        )
        if total == 0:
            raise BattleError(
                ErrorCode.NO_QUESTIONS,
                details={"quiz_id": quiz_id, "pool": report.total, "valid": report.valid},
            )
        if report.shrunk:
            logger.warning(
                f"Quiz {quiz_id}: {len(report.rejected)} of {report.total} questions are invalid"
            )

        join_code = generate_join_code(self.durable.active_join_codes(), self.rng)
        battle = self.durable.create_battle(
            quiz_id=quiz_id,
            host_id=session.user_id,
            host_name=session.display_name,
            join_code=join_code,
            total_questions=total,
            max_players=self.config.max_players,
            quiz_title=quiz.get("title"),
        )
        self._mirror(battle)
        self._put_presence(join_code, PresenceRecord(
            user_id=session.user_id,
            display_name=session.display_name,
            joined_at=self._clock(),
            avatar=session.avatar,
        ))
        self.timer.set_deadline(PHASE_LOBBY, join_code, self.config.lobby_timeout_seconds)
        session.enter_lobby(join_code, is_host=True)
        logger.info(f"[{join_code}] Battle created by {session.user_id} (quiz {quiz_id}, {total} questions)")
        return battle

    def join(self, session: ClientSession, join_code: str) -> Participant:
        """
        Join a waiting battle by code.

        A participant who lost their session during a running battle
        gets back in with ``reconnect``; joining is for waiting battles
        only.

        Raises:
            BattleError: INVALID_STATUS if the caller is already in a
                battle or the battle is not waiting, NOT_FOUND or
                TOO_MANY_PLAYERS
        """
        if session.in_battle:
            raise BattleError(
                ErrorCode.INVALID_STATUS, "Leave your current battle first",
                join_code=session.join_code, details={"operation": "join"},
            )
        participant = self.durable.add_participant(
            join_code, session.user_id, session.display_name, session.avatar
        )
        if self.presence.get(metadata_path(join_code)) is None:
            logger.warning(f"[{join_code}] Room metadata missing, rebuilding from store")
            self._mirror(self._battle(join_code))
        self._put_presence(join_code, PresenceRecord(
            user_id=session.user_id,
            display_name=session.display_name,
            joined_at=self._clock(),
            avatar=session.avatar,
        ))
        self.timer.cancel(join_code)
        session.enter_lobby(join_code, is_host=participant.is_host)
        logger.info(f"[{join_code}] {session.user_id} joined")
        return participant

    def _put_presence(self, join_code: str, record: PresenceRecord) -> None:
        self.presence.set(player_path(join_code, record.user_id), record.to_dict())

    def _set_ready(self, session: ClientSession, flag: bool) -> Readiness:
        join_code = self._joined(session)
        metadata = self._metadata(join_code)
        if metadata.get("status") != BattleStatus.WAITING.value:
            raise BattleError(
                ErrorCode.INVALID_STATUS, join_code=join_code,
                details={"operation": "ready", "status": metadata.get("status")},
            )
        path = player_path(join_code, session.user_id)
        if self.presence.get(path) is None:
            raise BattleError(ErrorCode.NOT_PARTICIPANT, join_code=join_code)
        self.presence.update(path, {"is_ready": flag})
        return self.readiness(join_code)

    def ready(self, session: ClientSession) -> Readiness:
        """Mark the caller ready (presence store only)."""
        return self._set_ready(session, True)

    def unready(self, session: ClientSession) -> Readiness:
        return self._set_ready(session, False)

    def add_viewer(self, join_code: str) -> int:
        count = int(self.presence.get(viewers_path(join_code)) or 0) + 1
        self.presence.set(viewers_path(join_code), count)
        return count

    def remove_viewer(self, join_code: str) -> int:
        count = max(0, int(self.presence.get(viewers_path(join_code)) or 0) - 1)
        self.presence.set(viewers_path(join_code), count)
        return count

    # ── Start ────────────────────────────────────────────────

    def _select(
        self, quiz: Dict[str, Any], mode: Union[SelectionMode, str], requested: int
    ) -> List[Dict[str, Any]]:
        pool = quiz.get("questions") or []
        mode_value = getattr(mode, "value", mode)
        if mode_value == SelectionMode.ADAPTIVE.value and not is_adaptive_eligible(
            pool, self.config.adaptive_min_pool
        ):
            logger.warning("Pool not eligible for adaptive selection, using normal")
            mode = SelectionMode.NORMAL
        report = selection_report(pool)
        count = clamp_count(
            requested,
            report.valid,
            minimum=self.config.min_selectable,
            reserve=self.config.selection_reserve,
        )
        return select_questions(pool, mode, count, self.rng)

    def start(
        self,
        session: ClientSession,
        mode: Union[SelectionMode, str] = SelectionMode.NORMAL,
        requested_count: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Start the battle (host only).

        Checks, in order: host, durable status, quiz still present,
        playable questions, minimum players, everyone ready. Then writes
        the question list and status to the presence store and flips the
        durable status.

        Returns:
            The selected, ordered question list

        Raises:
            BattleError: NOT_FOUND, NOT_HOST, INVALID_STATUS, QUIZ_DELETED,
                NO_QUESTIONS or NOT_ENOUGH_PLAYERS
            HalfAppliedTransitionError: The presence store shows
                in_progress but the durable store rejected the start
        """
        join_code = self._joined(session)
        battle = self._battle(join_code)
        self._require_host(session, battle, "start")
        machine = BattleStateMachine(join_code, battle.status)
        machine.require(BattleEvent.START)

        quiz = self.quizzes.get_quiz(battle.quiz_id)
        if quiz is None:
            self._cancel_battle(battle, reason="quiz_deleted")
            session.reset()
            raise BattleError(
                ErrorCode.QUIZ_DELETED, join_code=join_code,
                details={"operation": "start", "quiz_id": battle.quiz_id},
            )

        questions = self._select(quiz, mode, requested_count or battle.total_questions)
        if not questions:
            raise BattleError(
                ErrorCode.NO_QUESTIONS, join_code=join_code,
                details={"operation": "start", "quiz_id": battle.quiz_id},
            )

        readiness = self.readiness(join_code)
        counts = {
            "operation": "start",
            "min_players": self.config.min_players,
            "player_count": readiness.player_count,
        }
        if readiness.player_count < self.config.min_players:
            raise BattleError(ErrorCode.NOT_ENOUGH_PLAYERS, join_code=join_code, details=counts)
        if not readiness.all_ready:
            raise BattleError(
                ErrorCode.NOT_ENOUGH_PLAYERS,
                "Not every player is ready",
                join_code=join_code,
                details=dict(counts, not_ready=readiness.not_ready, reason="not_ready"),
            )

        self.presence.set(questions_path(join_code), questions)
        self.presence.update(metadata_path(join_code), {
            "status": BattleStatus.IN_PROGRESS.value,
            "total_questions": len(questions),
            "started_at": self._clock(),
        })
        try:
            self.durable.start_battle(
                join_code,
                session.user_id,
                expected_participants=readiness.player_count,
                min_players=self.config.min_players,
                total_questions=len(questions),
            )
        except BattleError as e:
            logger.error(f"[{join_code}] Durable start rejected after room went live: {e}")
            raise HalfAppliedTransitionError(
                e.code, join_code, BattleStatus.IN_PROGRESS.value,
                message=e.message, details=dict(e.details, operation="start"),
            ) from e
        except StoreError as e:
            logger.error(f"[{join_code}] Durable start failed after room went live: {e}")
            raise HalfAppliedTransitionError(
                ErrorCode.UNKNOWN_ERROR, join_code, BattleStatus.IN_PROGRESS.value,
                message=str(e), details={"operation": "start"},
            ) from e

        machine.transition(BattleEvent.START)
        self.timer.cancel(join_code)
        self.timer.set_deadline(PHASE_BATTLE, join_code, self.time_budget(len(questions)))
        session.enter_battle()
        return questions

    def rollback_start(self, session: ClientSession) -> bool:
        """
        Undo a half-applied start: the room goes back to waiting.

        Returns:
            True if the room was rolled back, False if there was nothing
            to undo

        Raises:
            BattleError: INVALID_STATUS if the durable store already
                shows the battle in progress
        """
        join_code = self._joined(session)
        battle = self._battle(join_code)
        self._require_host(session, battle, "roll back")
        metadata = self.presence.get(metadata_path(join_code))
        if metadata is None or metadata.get("status") != BattleStatus.IN_PROGRESS.value:
            return False
        if battle.status != BattleStatus.WAITING:
            raise BattleError(
                ErrorCode.INVALID_STATUS, "Battle already started in the store",
                join_code=join_code,
                details={"operation": "rollback_start", "status": battle.status.value},
            )
        self.presence.remove(questions_path(join_code))
        self.presence.update(metadata_path(join_code), {
            "status": BattleStatus.WAITING.value,
            "started_at": None,
        })
        session.view = ClientView.LOBBY
        logger.warning(f"[{join_code}] Start rolled back, room is waiting again")
        return True

    # ── In progress ──────────────────────────────────────────

    def submit_answer(
        self, session: ClientSession, question_index: int, submitted: Any
    ) -> GradeResult:
        """
        Grade and record the caller's answer to the current question.

        Each player answers each question once, in order. Finishing the
        last question writes the player's score to their durable row.

        Raises:
            BattleError: INVALID_STATUS if the battle is not in progress,
                the player forfeited or finished, or the question is not
                the one currently open; NOT_PARTICIPANT
        """
        join_code = self._joined(session)
        metadata = self._metadata(join_code)
        status = metadata.get("status")
        if status != BattleStatus.IN_PROGRESS.value:
            raise BattleError(
                ErrorCode.INVALID_STATUS, join_code=join_code,
                details={"operation": "submit_answer", "status": status},
            )

        path = player_path(join_code, session.user_id)
        record = self.presence.get(path)
        if record is None:
            raise BattleError(ErrorCode.NOT_PARTICIPANT, join_code=join_code)
        if record.get("forfeited") or record.get("finished"):
            raise BattleError(
                ErrorCode.INVALID_STATUS, "No further answers accepted",
                join_code=join_code, details={"operation": "submit_answer"},
            )

        questions = self.presence.get(questions_path(join_code)) or []
        expected = int(record.get("current_question") or 0)
        if (
            question_index != expected
            or question_index >= len(questions)
            or self.presence.get(answer_path(join_code, session.user_id, question_index)) is not None
        ):
            raise BattleError(
                ErrorCode.INVALID_STATUS,
                f"Question {question_index} is not open",
                join_code=join_code,
                details={"operation": "submit_answer", "expected": expected},
            )

        result = grade(questions[question_index], submitted)
        credit = result["partial_credit"]
        self.presence.set(
            answer_path(join_code, session.user_id, question_index),
            AnswerSubmission(
                user_id=session.user_id,
                question_index=question_index,
                submitted=submitted,
                is_correct=result["is_correct"],
                partial_credit=credit,
                submitted_at=self._clock(),
                accuracy=result.get("accuracy"),
            ).to_dict(),
        )
        score = int(record.get("score") or 0) + credit
        finished = question_index + 1 >= len(questions)
        self.presence.update(path, {
            "score": score,
            "current_question": question_index + 1,
            "finished": finished,
        })
        session.record_answer(question_index, credit)
        if finished:
            self.durable.update_score(join_code, session.user_id, score)
            logger.info(f"[{join_code}] {session.user_id} finished with {score} points")
        return result

    def _forfeit_silent(self, join_code: str, snapshot: Dict[str, Any]) -> List[str]:
        """Forfeit players with no submissions; freeze partial scores of the rest."""
        forfeited: List[str] = []
        for user_id, record in snapshot.items():
            if not isinstance(record, dict) or record.get("finished") or record.get("forfeited"):
                continue
            if int(record.get("current_question") or 0) == 0:
                self.presence.update(player_path(join_code, user_id), {"forfeited": True})
                self.durable.mark_forfeited(join_code, user_id)
                forfeited.append(user_id)
            else:
                self.durable.update_score(join_code, user_id, int(record.get("score") or 0))
        if forfeited:
            logger.info(f"[{join_code}] Time budget spent, forfeited: {forfeited}")
        return forfeited

    def _close(self, join_code: str, force: bool) -> None:
        """Flip the room to completed once everyone finished (or ``force``)."""
        metadata = self._metadata(join_code)
        status = BattleStatus(metadata.get("status"))
        if status == BattleStatus.COMPLETED:
            return
        machine = BattleStateMachine(join_code, status)
        machine.require(BattleEvent.COMPLETE)
        snapshot = self.presence.get(players_path(join_code)) or {}
        if not force and not all_finished(snapshot, int(metadata.get("total_questions") or 0)):
            raise BattleError(
                ErrorCode.INVALID_STATUS, "Players are still answering",
                join_code=join_code,
                details={"operation": "complete", "status": status.value,
                         "reason": "players_answering"},
            )
        if force:
            self._forfeit_silent(join_code, snapshot)
        self.presence.update(metadata_path(join_code), {
            "status": BattleStatus.COMPLETED.value,
            "completed_at": self._clock(),
        })
        machine.transition(BattleEvent.COMPLETE)
        self.timer.cancel(join_code)

    def partial_result(self, join_code: str) -> BattleResult:
        """
        Result computed from the presence store alone.

        Every client keeps this as the fallback shown when the durable
        store cannot be read.
        """
        metadata = self.presence.get(metadata_path(join_code)) or {}
        snapshot = self.presence.get(players_path(join_code)) or {}
        participants = [
            Participant(
                user_id=record.get("user_id", user_id),
                display_name=record.get("display_name", user_id),
                avatar=record.get("avatar"),
                forfeited=bool(record.get("forfeited")),
            )
            for user_id, record in snapshot.items()
            if isinstance(record, dict) and not record.get("is_viewer")
        ]
        return build_result(
            join_code,
            participants,
            scores_from_snapshot(snapshot),
            points=self.config.winner_points,
            exp=self.config.winner_exp,
            quiz_title=metadata.get("quiz_title"),
        )

    def complete(self, session: ClientSession, force: bool = False) -> BattleResult:
        """
        Complete the battle and sync results (host only).

        Args:
            session: Host session
            force: Complete even if players are still answering (time
                budget spent); players with no answers are forfeited

        Returns:
            The synced BattleResult

        Raises:
            BattleError: NOT_HOST, INVALID_STATUS
            SyncFailedError: The durable write failed; the room stays
                completed and ``session.last_result`` holds the partial
                result for display
        """
        join_code = self._joined(session)
        battle = self._battle(join_code)
        self._require_host(session, battle, "complete")
        self._close(join_code, force)
        session.show_results(self.partial_result(join_code))
        result = self.synchronizer.sync(join_code, session.user_id)
        session.last_result = result
        return result

    def receive_results(self, session: ClientSession) -> BattleResult:
        """Non-host: take the partial result once the room shows completed."""
        join_code = self._joined(session)
        metadata = self._metadata(join_code)
        if metadata.get("status") != BattleStatus.COMPLETED.value:
            raise BattleError(
                ErrorCode.INVALID_STATUS, "Battle has not completed yet",
                join_code=join_code,
                details={"operation": "results", "status": metadata.get("status")},
            )
        result = self.partial_result(join_code)
        session.show_results(result)
        return result

    # ── Leaving ──────────────────────────────────────────────

    def _depart(self, session: ClientSession, reason: str) -> None:
        join_code = self._joined(session)
        battle = self.durable.get_battle(join_code)
        path = player_path(join_code, session.user_id)

        if battle is None or not battle.status.is_active:
            self.presence.remove(path)
        elif battle.host_id == session.user_id:
            self._cancel_battle(battle, reason=f"host_{reason}")
        elif battle.status == BattleStatus.WAITING:
            self.durable.remove_participant(join_code, session.user_id)
            self.presence.remove(path)
            if self.readiness(join_code).player_count <= 1:
                self.timer.set_deadline(PHASE_LOBBY, join_code, self.config.lobby_timeout_seconds)
            logger.info(f"[{join_code}] {session.user_id} left the lobby ({reason})")
        else:
            record = self.presence.get(path)
            if record is not None:
                self.presence.update(path, {"forfeited": True, "is_online": False})
                self.durable.update_score(join_code, session.user_id, int(record.get("score") or 0))
            self.durable.mark_forfeited(join_code, session.user_id)
            logger.info(f"[{join_code}] {session.user_id} forfeited ({reason})")
        session.reset()

    def leave(self, session: ClientSession) -> None:
        """
        Leave the battle.

        While waiting the participant is removed from both stores; while
        in progress they are marked forfeited and keep their score. The
        host leaving cancels the battle.
        """
        self._depart(session, "leave")

    def disconnect(self, session: ClientSession) -> None:
        self._depart(session, "disconnect")

    def reconnect(self, session: ClientSession) -> PresenceRecord:
        """
        Restore the caller's presence record after it was lost.

        The record is rebuilt from the durable participant row; in
        progress, the question cursor and score are recovered from the
        caller's stored answers.

        Raises:
            BattleError: NOT_FOUND, INVALID_STATUS, NOT_PARTICIPANT
        """
        join_code = self._joined(session)
        battle = self._battle(join_code)
        if not battle.status.is_active:
            raise BattleError(
                ErrorCode.INVALID_STATUS, join_code=join_code,
                details={"operation": "reconnect", "status": battle.status.value},
            )
        row = next(
            (p for p in self.durable.list_participants(join_code) if p.user_id == session.user_id),
            None,
        )
        if row is None:
            raise BattleError(ErrorCode.NOT_PARTICIPANT, join_code=join_code)

        if self.presence.get(metadata_path(join_code)) is None:
            self._mirror(battle)

        path = player_path(join_code, session.user_id)
        existing = self.presence.get(path)
        if existing is not None:
            self.presence.update(path, {"is_online": True})
            return PresenceRecord.from_dict(self.presence.get(path))

        record = PresenceRecord.from_participant(row, joined_at=self._clock())
        if battle.status == BattleStatus.IN_PROGRESS:
            answers = self.presence.get(answers_path(join_code, session.user_id)) or {}
            record.current_question = len(answers)
            record.score = max(row.score, sum(
                int(a.get("partial_credit") or 0) for a in answers.values() if isinstance(a, dict)
            ))
            record.is_ready = True
            record.finished = record.current_question >= battle.total_questions
        self._put_presence(join_code, record)
        logger.info(f"[{join_code}] Presence rebuilt for {session.user_id}")
        return record

    # ── Cancellation and timeouts ────────────────────────────

    def _cancel_battle(self, battle: Battle, reason: str) -> None:
        join_code = battle.join_code
        machine = BattleStateMachine(join_code, battle.status)
        machine.transition(BattleEvent.CANCEL)
        self.durable.set_status(join_code, BattleStatus.CANCELLED)
        self.presence.remove(players_path(join_code))
        self.presence.remove(questions_path(join_code))
        self.presence.remove(all_answers_path(join_code))
        self.presence.update(metadata_path(join_code), {
            "status": BattleStatus.CANCELLED.value,
            "reason": reason,
        })
        self.timer.cancel(join_code)
        logger.info(f"[{join_code}] Battle cancelled ({reason})")

    def cancel(self, session: ClientSession, reason: str = "host_cancelled") -> None:
        """Cancel a waiting or in-progress battle (host only)."""
        join_code = self._joined(session)
        battle = self._battle(join_code)
        self._require_host(session, battle, "cancel")
        self._cancel_battle(battle, reason)
        session.reset()

    def expire_lobby(self, join_code: str, session: Optional[ClientSession] = None) -> bool:
        """
        Cancel a waiting lobby where the host is still alone.

        Returns:
            True if the lobby was expired
        """
        battle = self.durable.get_battle(join_code)
        if battle is None or battle.status != BattleStatus.WAITING:
            return False
        if self.readiness(join_code).player_count > 1:
            return False
        self._cancel_battle(battle, reason="lobby_expired")
        if session is not None and session.join_code == join_code:
            session.reset()
        return True

    def check_timeouts(self) -> List[Dict[str, Any]]:
        """
        Act on expired deadlines.

        Lobby deadlines expire the lobby if the host is still alone.
        Battle deadlines complete the room, forfeiting silent players;
        the host then calls ``complete`` to sync.
        """
        handled = []
        for entry in self.timer.check_expired():
            join_code = entry["join_code"]
            if entry["phase"] == PHASE_LOBBY:
                done = self.expire_lobby(join_code)
            else:
                try:
                    self._close(join_code, force=True)
                    done = True
                except BattleError as e:
                    logger.warning(f"[{join_code}] Could not close battle on timeout: {e}")
                    done = False
            handled.append(dict(entry, handled=done))
        return handled
