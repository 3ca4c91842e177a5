# Area: Shared
"""
Shared utilities used across the battle engine.

This package contains:
- Logging configuration
- Retry helper for store calls
"""

from .logging_config import (
    setup_logging,
    log_battle_error,
    enable_quiet_mode,
    disable_quiet_mode,
    is_quiet_mode_enabled,
)
from .retry import retry_call

__all__ = [
    "setup_logging",
    "log_battle_error",
    "enable_quiet_mode",
    "disable_quiet_mode",
    "is_quiet_mode_enabled",
    "retry_call",
]
