# Area: Shared
"""
quiz_battle.errors — Error codes and exception hierarchy
=========================================================

Defines the machine-readable error taxonomy surfaced by battle
transitions and result sync. Each exception stores full context
for structured logging.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional

from .error_formatter import format_error_block


class ErrorCode(Enum):
    """Named failure reasons for join/start/sync operations."""
    QUIZ_DELETED = "QUIZ_DELETED"
    NO_QUESTIONS = "NO_QUESTIONS"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    TOO_MANY_PLAYERS = "TOO_MANY_PLAYERS"
    INVALID_STATUS = "INVALID_STATUS"
    NOT_HOST = "NOT_HOST"
    NOT_FOUND = "NOT_FOUND"
    NOT_PARTICIPANT = "NOT_PARTICIPANT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @property
    def retryable(self) -> bool:
        return self in _RETRYABLE

    @property
    def fatal(self) -> bool:
        return self not in _RETRYABLE

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_RETRYABLE = {ErrorCode.NOT_ENOUGH_PLAYERS, ErrorCode.UNKNOWN_ERROR}

_DEFAULT_MESSAGES = {
    ErrorCode.QUIZ_DELETED: "The quiz for this battle no longer exists",
    ErrorCode.NO_QUESTIONS: "The quiz has no playable questions",
    ErrorCode.NOT_ENOUGH_PLAYERS: "Not enough players to start",
    ErrorCode.TOO_MANY_PLAYERS: "Battle is full",
    ErrorCode.INVALID_STATUS: "Battle has already progressed",
    ErrorCode.NOT_HOST: "Only the host can do this",
    ErrorCode.NOT_FOUND: "Battle not found",
    ErrorCode.NOT_PARTICIPANT: "You are not in this battle",
    ErrorCode.UNKNOWN_ERROR: "Something went wrong",
}


class QuizBattleError(Exception):
    """Base exception for all quiz_battle package errors."""
    pass


class ConfigError(QuizBattleError):
    """Raised when configuration values fail validation."""
    pass


class StoreError(QuizBattleError):
    """Raised by a store backend when a read or write cannot complete."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class BattleError(QuizBattleError):
    """
    A battle operation was rejected.

    Attributes:
        code: Machine-readable ErrorCode
        message: Human-readable explanation
        join_code: Battle the failure relates to, if known
        details: Extra context (counts, statuses) for logs and UI
    """

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        join_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message or code.default_message
        self.join_code = join_code
        self.details = details or {}
        super().__init__(f"[{code.value}] {self.message}")

    @property
    def retryable(self) -> bool:
        return self.code.retryable

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "join_code": self.join_code,
            "retryable": self.retryable,
            "details": self.details,
        }

    def format_error_log(self) -> str:
        return format_error_block(
            error_type=self.code.value,
            operation=self.details.get("operation", "battle"),
            join_code=self.join_code,
            message=self.message,
            context=self.details,
        )


class HalfAppliedTransitionError(BattleError):
    """
    Raised when the ephemeral store accepted a transition but the
    durable store rejected it. The two stores are out of step until
    the caller rolls back or abandons the battle.
    """

    def __init__(
        self,
        code: ErrorCode,
        join_code: str,
        applied_status: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.applied_status = applied_status
        merged = dict(details or {})
        merged["ephemeral_status"] = applied_status
        super().__init__(code, message, join_code=join_code, details=merged)


class SyncFailedError(BattleError):
    """Raised when the durable result write keeps failing after retries."""

    def __init__(self, join_code: str, attempts: int, last_error: Optional[Exception] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            ErrorCode.UNKNOWN_ERROR,
            f"Result sync failed after {attempts} attempts",
            join_code=join_code,
            details={
                "operation": "sync",
                "attempts": attempts,
                "last_error": repr(last_error) if last_error else None,
            },
        )

