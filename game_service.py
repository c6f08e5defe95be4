# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Game service: the operations callers use to run a game.

Wires the session store, the roster lookup and the game engine together.
Every operation takes the game's lock through the store, validates its
input and the game's state, and only then mutates anything. Results come
back with a snapshot of the game serialized under that same lock.
"""

from __future__ import annotations

import logging

from errors import GameValidationError, InvalidGameStateError
from models import Half, Outcome, PitchType
from roster import Roster
from session_store import GameSessionStore
from simulation import GameEngine, GameState, game_state_to_dict, reset_bases, stats_summary

logger = logging.getLogger(__name__)


class GameService:
    """Create games, submit lineups and play them out pitch by pitch."""

    def __init__(self, roster: Roster, engine: GameEngine | None = None,
                 store: GameSessionStore | None = None):
        self.roster = roster
        self.engine = engine or GameEngine()
        self.store = store if store is not None else GameSessionStore()

    # -------------------------------------------------------------------
    # Game setup
    # -------------------------------------------------------------------

    def create_game(self, home_team: str, away_team: str, max_innings: int = 9) -> GameState:
        if not home_team or not home_team.strip() or not away_team or not away_team.strip():
            raise GameValidationError("Home and away team names are required.", field="team")
        home_team, away_team = home_team.strip(), away_team.strip()
        if home_team == away_team:
            raise GameValidationError("Home and away teams must be different.", field="team")
        if max_innings < 1:
            raise GameValidationError("max_innings must be at least 1.", field="max_innings")

        state = GameState(home_team=home_team, away_team=away_team, max_innings=max_innings)
        reset_bases(state)
        self.store.put(state)
        logger.info("Created game %s: %s at %s, %d innings",
                    state.game_id, away_team, home_team, max_innings)
        return state

    def get_game(self, game_id: str) -> GameState:
        """Return the live state. Callers outside the engine should use snapshot()."""
        if not game_id or not game_id.strip():
            raise GameValidationError("Game id is required.", field="game_id")
        return self.store.get(game_id)

    def snapshot(self, game_id: str) -> dict:
        """Serialize the game while holding its lock."""
        if not game_id or not game_id.strip():
            raise GameValidationError("Game id is required.", field="game_id")
        with self.store.session(game_id) as state:
            return game_state_to_dict(state)

    def delete_game(self, game_id: str) -> None:
        self.store.delete(game_id)

    def submit_lineup(self, game_id: str, team_name: str, batting_order: list[str],
                      starting_pitcher: str) -> dict:
        """Set a team's batting order and starting pitcher.

        Once both teams are in, the current batter and pitcher are set for
        the half-inning being played. Returns a snapshot of the game.
        """
        if not batting_order:
            raise GameValidationError("Batting order must not be empty.", field="batting_order")

        with self.store.session(game_id) as state:
            if state.is_game_over:
                raise InvalidGameStateError("The game is already over.")
            if team_name == state.home_team:
                is_home = True
            elif team_name == state.away_team:
                is_home = False
            else:
                raise GameValidationError(f"Team {team_name} is not playing in this game.",
                                          field="team_name")
            if (state.home_batting_order if is_home else state.away_batting_order):
                raise InvalidGameStateError(f"Lineup for {team_name} was already submitted.")

            batters = self.roster.find_batters(batting_order)
            if len(batters) != len(batting_order):
                found = {b.name for b in batters}
                missing = [name for name in batting_order if name not in found]
                raise GameValidationError(
                    "Some batters in the lineup could not be found.",
                    field="batting_order", details=missing,
                )
            for batter in batters:
                if batter.team != team_name:
                    raise GameValidationError(
                        f"Batter {batter.name} does not play for {team_name}.",
                        field="batting_order",
                    )
            pitcher = self.roster.find_pitcher(starting_pitcher)
            if pitcher is None or pitcher.team != team_name:
                raise GameValidationError(
                    f"Starting pitcher {starting_pitcher} not found on {team_name}.",
                    field="starting_pitcher",
                )

            if is_home:
                state.home_batting_order = batters
                state.home_starting_pitcher = pitcher
            else:
                state.away_batting_order = batters
                state.away_starting_pitcher = pitcher
            logger.info("Game %s: lineup set for %s, %s starting",
                        game_id, team_name, pitcher.name)

            self._start_if_ready(state)
            return game_state_to_dict(state)

    def _start_if_ready(self, state: GameState) -> None:
        if state.current_batter is not None or state.current_pitcher is not None:
            return
        if state.half == Half.TOP:
            order, pitcher = state.away_batting_order, state.home_starting_pitcher
        else:
            order, pitcher = state.home_batting_order, state.away_starting_pitcher
        if not order or pitcher is None:
            return
        state.batting_order = order
        state.current_batter_index = 0
        state.current_batter = order[0]
        state.current_pitcher = pitcher
        logger.info("Game %s: play ball! %s leads off against %s",
                    state.game_id, state.current_batter.name, pitcher.name)

    # -------------------------------------------------------------------
    # Pitch events
    # -------------------------------------------------------------------

    def pitch(self, game_id: str, swung: bool, timing: float | None = None,
              pitch_type: PitchType = PitchType.STRIKE) -> tuple[Outcome, dict]:
        """Play one pitch; the batter takes it or swings with ``timing``.

        Returns the outcome and a snapshot of the game taken under the same
        lock, so the two always agree.
        """
        if timing is not None and not 0.0 <= timing <= 1.0:
            raise GameValidationError("Timing must be between 0.0 and 1.0.", field="timing")
        with self.store.session(game_id) as state:
            outcome = self.engine.play_pitch(state, swung, timing, pitch_type)
            return outcome, game_state_to_dict(state)

    def pitcher_throw(self, game_id: str, pitch_type: PitchType) -> tuple[Outcome, dict]:
        """Play one pitch the batter takes, aimed as ``pitch_type``."""
        return self.pitch(game_id, swung=False, pitch_type=pitch_type)

    def advance_runners(self, game_id: str, bases: int) -> tuple[int, dict]:
        """Move every runner ahead outside normal play.

        Returns runs scored and a snapshot of the game.
        """
        if bases is None or not 1 <= bases <= 4:
            raise GameValidationError("Bases to advance must be between 1 and 4.",
                                      field="bases")
        with self.store.session(game_id) as state:
            runs = self.engine.move_runners(state, bases)
            return runs, game_state_to_dict(state)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def advance_half_inning(self, game_id: str) -> dict:
        with self.store.session(game_id) as state:
            return game_state_to_dict(self.engine.advance_half_inning(state))

    def end_game(self, game_id: str) -> dict:
        with self.store.session(game_id) as state:
            return game_state_to_dict(self.engine.end_game(state))

    def get_stats(self, game_id: str) -> str:
        with self.store.session(game_id) as state:
            return stats_summary(state)
