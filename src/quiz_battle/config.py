# Area: Shared
"""
quiz_battle.config — Battle engine configuration
=================================================

Validated configuration for battle limits, timeouts, rewards and
storage locations.

Values are resolved in this order (later wins):
    1. Model defaults
    2. JSON config file (optional)
    3. ``.env`` file / environment variables prefixed ``QUIZ_BATTLE_``
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigError

logger = logging.getLogger("quiz_battle.config")

ENV_PREFIX = "QUIZ_BATTLE_"

# Required config keys when a raw dict is handed to the engine
REQUIRED_CONFIG_KEYS = [
    "min_players",
    "max_players",
]


class BattleConfig(BaseModel):
    """Tunable limits for the battle engine."""

    min_players: int = Field(default=2, ge=1)
    max_players: int = Field(default=8, ge=1)
    lobby_timeout_seconds: float = Field(default=60.0, gt=0)
    question_time_limit_seconds: int = Field(default=30, gt=0)

    # Result reads and sync
    results_grace_seconds: float = Field(default=2.0, ge=0)
    results_retry_delay_seconds: float = Field(default=0.5, ge=0)
    sync_max_attempts: int = Field(default=3, ge=1)
    sync_backoff_seconds: float = Field(default=0.25, ge=0)

    # Rewards granted to each winner
    winner_points: int = Field(default=50, ge=0)
    winner_exp: int = Field(default=100, ge=0)

    # Question selection
    adaptive_min_pool: int = Field(default=5, ge=1)
    min_selectable: int = Field(default=1, ge=1)
    selection_reserve: int = Field(default=0, ge=0)

    # Abandoned battle cleanup
    waiting_timeout_minutes: int = Field(default=30, gt=0)
    in_progress_timeout_hours: int = Field(default=2, gt=0)

    db_path: str = "quiz_battle.db"
    log_file: str = "quiz_battle.log"

    @model_validator(mode="after")
    def _check_player_bounds(self) -> "BattleConfig":
        if self.min_players > self.max_players:
            raise ValueError(
                f"min_players ({self.min_players}) exceeds max_players ({self.max_players})"
            )
        return self


def validate_config(config: dict) -> None:
    """
    Validate required configuration keys.

    Args:
        config: Configuration dict

    Raises:
        ConfigError: If required keys are missing
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if k not in config]
    if missing:
        raise ConfigError(f"Missing required config keys: {missing}")


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Any]:
    """Collect QUIZ_BATTLE_* variables that name a known config field."""
    overrides: Dict[str, Any] = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX):].lower()
        if field_name in BattleConfig.model_fields:
            overrides[field_name] = value
        else:
            logger.debug(f"Ignoring unknown config variable {key}")
    return overrides


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
    environ: Optional[Dict[str, str]] = None,
) -> BattleConfig:
    """
    Build a BattleConfig from file and environment.

    Args:
        config_path: Optional JSON file with config keys
        env_file: Optional .env path (defaults to searching the cwd)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated BattleConfig

    Raises:
        ConfigError: If any value fails validation
    """
    values: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    values.update(json.load(f))
            except json.JSONDecodeError as e:
                raise ConfigError(f"Config file {config_path} is not valid JSON: {e}") from e
        else:
            logger.warning(f"Config file not found: {config_path}")

    if environ is None:
        load_dotenv(env_file)
        environ = dict(os.environ)
    values.update(_env_overrides(environ))

    try:
        return BattleConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid battle config: {e}") from e
