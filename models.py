# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the baseball game engine.

Enumerations shared by the resolver and the engine, the roster records a
game holds on to (Batter, Pitcher), and the Pydantic request models that
validate caller input before any game state is touched.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Half(str, Enum):
    TOP = "TOP"  # away team bats
    BOTTOM = "BOTTOM"  # home team bats


class PitchType(str, Enum):
    """Where the pitcher means to put the ball."""
    STRIKE = "STRIKE"
    BALL = "BALL"


class Outcome(str, Enum):
    """Result of a single pitch event."""
    STRIKE = "STRIKE"
    BALL = "BALL"
    FOUL = "FOUL"
    WHIFF = "WHIFF"
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    HOME_RUN = "HOME_RUN"
    GROUNDOUT = "GROUNDOUT"
    DOUBLE_PLAY = "DOUBLE_PLAY"
    FLYOUT = "FLYOUT"
    SWINGING_STRIKEOUT = "SWINGING_STRIKEOUT"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").lower()


class SwingModel(str, Enum):
    TIMING = "TIMING"  # location-aware, timing-banded ladders
    RATINGS = "RATINGS"  # score table from batter vs. pitcher ratings


# Bases gained by the batter on each hit type
HIT_BASES: dict[Outcome, int] = {
    Outcome.SINGLE: 1,
    Outcome.DOUBLE: 2,
    Outcome.TRIPLE: 3,
}


# ---------------------------------------------------------------------------
# Roster records
# ---------------------------------------------------------------------------

class Batter(BaseModel):
    """A hitter as returned by the roster."""
    name: str = Field(min_length=1)
    team: str = Field(min_length=1)
    contact: int = Field(ge=0, le=100, description="Contact ability (0-100)")
    power: int = Field(ge=0, le=100, description="Power rating (0-100)")
    batting_average: float = Field(default=0.250, ge=0.0, le=1.0)
    home_runs: int = Field(default=0, ge=0)
    rbis: int = Field(default=0, ge=0)


class Pitcher(BaseModel):
    """A pitcher as returned by the roster."""
    name: str = Field(min_length=1)
    team: str = Field(min_length=1)
    control: int = Field(ge=0, le=100, description="Control rating (0-100)")
    speed: int = Field(ge=0, le=100, description="Velocity rating (0-100)")
    era: float = Field(default=4.50, ge=0.0)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

def _require_text(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("must be a non-empty string")
    return v.strip()


class CreateGameRequest(BaseModel):
    home_team: str
    away_team: str
    max_innings: int = Field(default=9, ge=1)

    @field_validator("home_team", "away_team")
    @classmethod
    def validate_team(cls, v: str) -> str:
        return _require_text(v)


class LineupRequest(BaseModel):
    team_name: str
    batting_order: list[str] = Field(min_length=1)
    starting_pitcher: str

    @field_validator("team_name", "starting_pitcher")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("batting_order")
    @classmethod
    def validate_batting_order(cls, v: list[str]) -> list[str]:
        names = [_require_text(name) for name in v]
        if len(set(names)) != len(names):
            raise ValueError("batting order lists a player more than once")
        return names


class SwingRequest(BaseModel):
    swing: bool
    timing: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    pitch_type: PitchType = PitchType.STRIKE


class PitchRequest(BaseModel):
    pitch_type: PitchType


class AdvanceRunnersRequest(BaseModel):
    bases: int = Field(ge=1, le=4)
