"""Centralized configuration for environment variables and game rules."""

import logging
import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from models import SwingModel

ROSTER_PATH_ENV = "BASEBALL_ROSTER_PATH"
SEED_ENV = "BASEBALL_SEED"
DOUBLE_PLAY_ENV = "BASEBALL_DOUBLE_PLAY_PROBABILITY"
SWING_MODEL_ENV = "BASEBALL_SWING_MODEL"
LOG_LEVEL_ENV = "BASEBALL_LOG_LEVEL"
PORT_ENV = "PORT"

DEFAULT_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "sample_rosters.json"
DEFAULT_PORT = 5050


class GameRules(BaseModel):
    """Tuning constants for outcome resolution."""
    double_play_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    swing_model: SwingModel = SwingModel.TIMING
    default_timing: float = Field(default=0.5, ge=0.0, le=1.0)


def get_roster_path() -> Path:
    """Return the roster JSON path, from the environment or the bundled sample."""
    value = os.environ.get(ROSTER_PATH_ENV, "")
    return Path(value) if value else DEFAULT_ROSTER_PATH


def get_seed() -> int | None:
    """Return the resolver seed, or None for a random one."""
    value = os.environ.get(SEED_ENV, "")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{SEED_ENV} must be an integer, got {value!r}") from None


def get_port() -> int:
    return int(os.environ.get(PORT_ENV, DEFAULT_PORT))


def get_log_level() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def load_rules() -> GameRules:
    """Build GameRules from the environment, keeping defaults for unset values."""
    overrides = {}
    if os.environ.get(DOUBLE_PLAY_ENV):
        overrides["double_play_probability"] = os.environ[DOUBLE_PLAY_ENV]
    if os.environ.get(SWING_MODEL_ENV):
        overrides["swing_model"] = os.environ[SWING_MODEL_ENV].upper()
    return GameRules(**overrides)


def require_rules() -> GameRules:
    """Return the configured rules or exit with an error."""
    try:
        return load_rules()
    except ValidationError as e:
        print(f"Error: invalid game rule configuration:\n{e}", file=sys.stderr)
        sys.exit(1)
