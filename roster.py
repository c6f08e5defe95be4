# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Roster lookup backed by a JSON file.

The file lists teams, each with its batters and pitchers::

    {
      "teams": [
        {
          "team_name": "Harbor Hawks",
          "batters": [{"name": "...", "contact": 70, "power": 55, ...}],
          "pitchers": [{"name": "...", "control": 65, "speed": 80, ...}]
        }
      ]
    }

Player names are unique across the file. Lookups return fresh copies so a
game can update a batter's tallies without touching the roster.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from config import get_roster_path
from models import Batter, Pitcher

logger = logging.getLogger(__name__)


def load_rosters(path: Path | None = None) -> dict:
    """Load the raw roster JSON."""
    p = path or get_roster_path()
    with open(p) as f:
        return json.load(f)


class Roster:
    """Name-indexed batters and pitchers for every team in a roster file."""

    def __init__(self, data: dict):
        self._batters: dict[str, Batter] = {}
        self._pitchers: dict[str, Pitcher] = {}
        self._teams: dict[str, tuple[list[str], list[str]]] = {}

        for team in data.get("teams", []):
            team_name = team["team_name"]
            batter_names, pitcher_names = [], []
            for entry in team.get("batters", []):
                batter = Batter(team=team_name, **entry)
                self._batters[batter.name] = batter
                batter_names.append(batter.name)
            for entry in team.get("pitchers", []):
                pitcher = Pitcher(team=team_name, **entry)
                self._pitchers[pitcher.name] = pitcher
                pitcher_names.append(pitcher.name)
            self._teams[team_name] = (batter_names, pitcher_names)

    @classmethod
    def from_file(cls, path: Path | None = None) -> Roster:
        p = path or get_roster_path()
        try:
            roster = cls(load_rosters(p))
        except (KeyError, TypeError, ValidationError) as e:
            raise ValueError(f"Malformed roster file {p}: {e}") from e
        logger.info("Loaded roster %s: %d teams", p, len(roster._teams))
        return roster

    def team_names(self) -> list[str]:
        return list(self._teams)

    def find_batter(self, name: str) -> Batter | None:
        batter = self._batters.get(name)
        return batter.model_copy() if batter else None

    def find_batters(self, names: list[str]) -> list[Batter]:
        """Return the batters that exist, in the order asked for."""
        return [b for b in (self.find_batter(name) for name in names) if b is not None]

    def find_pitcher(self, name: str) -> Pitcher | None:
        pitcher = self._pitchers.get(name)
        return pitcher.model_copy() if pitcher else None

    def default_lineup(self, team_name: str) -> tuple[list[str], str]:
        """First nine batters and the first listed pitcher of a team."""
        if team_name not in self._teams:
            raise KeyError(team_name)
        batter_names, pitcher_names = self._teams[team_name]
        if not batter_names or not pitcher_names:
            raise ValueError(f"Team {team_name} has no batters or no pitchers")
        return batter_names[:9], pitcher_names[0]
