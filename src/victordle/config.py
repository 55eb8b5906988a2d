"""
victordle.config — Engine configuration
=======================================

Timing and rule constants for matchmaking and game sessions.

Values are loaded, lowest priority first, from:
    1. EngineConfig defaults
    2. An optional JSON config file
    3. Environment variables (``VICTORDLE_*``), including a local .env file

Every fixed delay of the matchmaking protocol lives here so that a
deployment (or a test) can tighten or relax it without code changes.
"""

from __future__ import annotations
import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger("victordle.config")


class ExhaustedRewardPolicy(str, Enum):
    """Score awarded when a game ends because a row was exhausted."""
    NONE = "none"                # no score change
    CONSOLATION = "consolation"  # both players get consolation_points


class EngineConfig(BaseModel):
    """All tunable constants of the engine."""

    # Matchmaking
    heartbeat_interval_seconds: float = Field(default=10.0, gt=0)
    staleness_threshold_seconds: float = Field(default=30.0, gt=0)
    listener_settle_seconds: float = Field(default=0.5, ge=0)
    min_join_settle_seconds: float = Field(default=2.0, ge=0)
    other_then_self_delay_seconds: float = Field(default=0.5, ge=0)
    cleanup_grace_seconds: float = Field(default=5.0, ge=0)

    # Turns
    turn_seconds: float = Field(default=10.0, gt=0)
    turn_tick_seconds: float = Field(default=1.0, gt=0)
    max_guesses: int = Field(default=6, ge=1)

    # Scoring
    win_bonus: int = Field(default=10, ge=0)
    exhausted_reward_policy: ExhaustedRewardPolicy = ExhaustedRewardPolicy.NONE
    consolation_points: int = Field(default=1, ge=0)

    # Store layout
    players_collection: str = "players"
    queue_collection: str = "queues"
    games_collection: str = "games"
    pairs_collection: str = "pairs"

    log_file: Optional[str] = "victordle.log"

    @model_validator(mode="after")
    def _check_timing(self) -> "EngineConfig":
        if self.staleness_threshold_seconds <= self.heartbeat_interval_seconds:
            raise ValueError(
                "staleness_threshold_seconds must exceed heartbeat_interval_seconds, "
                "otherwise live players are treated as abandoned"
            )
        if self.turn_tick_seconds > self.turn_seconds:
            raise ValueError("turn_tick_seconds cannot exceed turn_seconds")
        return self


# Environment variable -> config key
ENV_MAPPINGS = {
    "VICTORDLE_HEARTBEAT_SECONDS": "heartbeat_interval_seconds",
    "VICTORDLE_STALENESS_SECONDS": "staleness_threshold_seconds",
    "VICTORDLE_LISTENER_SETTLE_SECONDS": "listener_settle_seconds",
    "VICTORDLE_MIN_JOIN_SETTLE_SECONDS": "min_join_settle_seconds",
    "VICTORDLE_OTHER_THEN_SELF_SECONDS": "other_then_self_delay_seconds",
    "VICTORDLE_CLEANUP_GRACE_SECONDS": "cleanup_grace_seconds",
    "VICTORDLE_TURN_SECONDS": "turn_seconds",
    "VICTORDLE_TURN_TICK_SECONDS": "turn_tick_seconds",
    "VICTORDLE_MAX_GUESSES": "max_guesses",
    "VICTORDLE_WIN_BONUS": "win_bonus",
    "VICTORDLE_EXHAUSTED_REWARD": "exhausted_reward_policy",
    "VICTORDLE_CONSOLATION_POINTS": "consolation_points",
    "VICTORDLE_LOG_FILE": "log_file",
}


def validate_config(config: Mapping[str, Any]) -> EngineConfig:
    """
    Validate a raw config mapping.

    Args:
        config: Configuration dict (unknown keys are ignored)

    Returns:
        The validated EngineConfig

    Raises:
        ValueError: If a value is out of range or timings are inconsistent
    """
    return EngineConfig.model_validate(dict(config))


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> EngineConfig:
    """
    Load config from an optional JSON file and the environment.

    Args:
        config_path: Path to a JSON config file (missing file is ignored)
        environ: Environment mapping; defaults to ``os.environ`` after
            loading a local .env file

    Returns:
        The validated EngineConfig
    """
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
        else:
            logger.warning(f"Config file not found: {config_path}")

    if environ is None:
        load_dotenv()
        environ = os.environ

    # Override with environment variables
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in environ:
            config[config_key] = environ[env_key]

    return validate_config(config)
