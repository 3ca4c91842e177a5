# Area: Shared
"""
quiz_battle._shared.logging_config — Structured logging setup
=============================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Provides structured error logging for rejected battle operations
and a quiet mode that silences the terminal while the lobby
animation is drawing.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import BattleError

# Package logger
logger = logging.getLogger("quiz_battle")

# Flag to control terminal output while the lobby view owns the screen
_quiet_mode_enabled = False

# LogRecord attributes that are not user-supplied ``extra`` fields
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class QuietFilter(logging.Filter):
    """Filter that suppresses terminal logs below WARNING in quiet mode."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not _quiet_mode_enabled:
            return True
        return record.levelno >= logging.WARNING


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        original = record.levelname
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output. Carries ``extra`` fields through."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(
    log_file_path: str = "quiz_battle.log",
    level: int = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str
        Path to the log file. Defaults to 'quiz_battle.log' in current dir.
    level : int
        Logging level. Defaults to INFO.
    """
    pkg_logger = logging.getLogger("quiz_battle")
    pkg_logger.setLevel(level)

    # Remove existing handlers
    pkg_logger.handlers.clear()

    # Terminal handler with colors
    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(QuietFilter())
    pkg_logger.addHandler(terminal_handler)

    # File handler with JSON
    try:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)
    except OSError as e:
        pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False


def log_battle_error(error: "BattleError") -> None:
    """
    Log a rejected battle operation in the structured format.

    Parameters
    ----------
    error : BattleError
        The error to log.
    """
    error_block = error.format_error_log()

    # Print to terminal (bypassing logger for exact formatting)
    print(error_block, file=sys.stderr)

    logger.error(
        f"Battle error: {error.code.value}",
        extra={
            "error_code": error.code.value,
            "join_code": error.join_code,
            "retryable": error.retryable,
        },
    )


def enable_quiet_mode() -> None:
    """Suppress INFO/DEBUG terminal output (file logging is unchanged)."""
    global _quiet_mode_enabled
    _quiet_mode_enabled = True


def disable_quiet_mode() -> None:
    """Restore normal terminal logging."""
    global _quiet_mode_enabled
    _quiet_mode_enabled = False


def is_quiet_mode_enabled() -> bool:
    """Check if quiet mode is enabled."""
    return _quiet_mode_enabled
