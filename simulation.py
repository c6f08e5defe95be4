# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Baseball game state machine.

Holds the authoritative game state and applies pitch outcomes to it:
count handling, batting-order advancement, base advancement and scoring,
half-inning transitions and end-of-game detection.

Outcomes come from an OutcomeResolver; this module never draws random
numbers except through it.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from config import GameRules
from errors import InvalidGameStateError
from models import HIT_BASES, Batter, Half, Outcome, Pitcher, PitchType, SwingModel
from outcomes import OutcomeResolver

logger = logging.getLogger(__name__)

DRAW = "DRAW"


# ---------------------------------------------------------------------------
# Play-by-play event
# ---------------------------------------------------------------------------

@dataclass
class PlayEvent:
    inning: int
    half: Half
    outs_before: int
    description: str
    event_type: str  # "pitch", "half_inning", "game_end", "baserunning"
    score_home: int = 0
    score_away: int = 0
    runs_scored: int = 0
    outcome: Optional[Outcome] = None

    def to_dict(self) -> dict:
        return {
            "inning": self.inning,
            "half": self.half.value,
            "outs_before": self.outs_before,
            "description": self.description,
            "event_type": self.event_type,
            "score": {"home": self.score_home, "away": self.score_away},
            "runs_scored": self.runs_scored,
            "outcome": self.outcome.value if self.outcome else None,
        }


# ---------------------------------------------------------------------------
# Main game state
# ---------------------------------------------------------------------------

@dataclass
class GameState:
    """Authoritative game state.

    ``bases`` has four slots to keep base numbers as indexes; slot 0 is
    home plate and is never occupied.
    """
    home_team: str
    away_team: str
    max_innings: int = 9
    game_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    inning: int = 1
    half: Half = Half.TOP
    outs: int = 0
    strikes: int = 0
    balls: int = 0
    home_score: int = 0
    away_score: int = 0
    bases: list[Optional[Batter]] = field(default_factory=lambda: [None] * 4)

    home_batting_order: list[Batter] = field(default_factory=list)
    away_batting_order: list[Batter] = field(default_factory=list)
    batting_order: list[Batter] = field(default_factory=list)  # active lineup
    current_batter_index: int = 0
    current_batter: Optional[Batter] = None
    current_pitcher: Optional[Pitcher] = None
    home_starting_pitcher: Optional[Pitcher] = None
    away_starting_pitcher: Optional[Pitcher] = None

    is_game_over: bool = False
    winner: Optional[str] = None
    play_log: list[PlayEvent] = field(default_factory=list)

    def batting_team(self) -> str:
        return self.away_team if self.half == Half.TOP else self.home_team

    def runner_on(self, base: int) -> Batter | None:
        return self.bases[base]

    def runners_on_base(self) -> int:
        return sum(1 for runner in self.bases[1:] if runner is not None)

    def add_runs(self, runs: int) -> None:
        """Credit runs to the team at bat."""
        if self.half == Half.TOP:
            self.away_score += runs
        else:
            self.home_score += runs

    def half_inning_over(self) -> bool:
        return self.outs >= 3

    def score_display(self) -> str:
        return f"{self.away_team} {self.away_score} - {self.home_team} {self.home_score}"


# ---------------------------------------------------------------------------
# Base advancement
# ---------------------------------------------------------------------------

def reset_bases(state: GameState) -> None:
    state.bases = [None] * 4


def place_runner(state: GameState, base: int, runner: Batter) -> None:
    """Put a runner directly on first, second or third."""
    if base not in (1, 2, 3):
        raise ValueError(f"base must be 1, 2 or 3, got {base}")
    state.bases[base] = runner


def advance_runners(state: GameState, bases: int) -> int:
    """Move every runner ``bases`` bases ahead; returns runs scored.

    Third base is processed first so no runner lands on a teammate who has
    not moved yet.
    """
    runs = 0
    for base in (3, 2, 1):
        runner = state.bases[base]
        if runner is None:
            continue
        state.bases[base] = None
        target = base + bases
        if target >= 4:
            runs += 1
        else:
            state.bases[target] = runner
    if runs:
        state.add_runs(runs)
    return runs


def force_advance(state: GameState, runner: Batter, base: int = 1) -> int:
    """Put ``runner`` on ``base``, pushing along only runners who are forced.

    Returns runs scored: 1 when a runner is forced home from third.
    """
    while base <= 3:
        runner, state.bases[base] = state.bases[base], runner
        if runner is None:
            return 0
        base += 1
    state.add_runs(1)
    return 1


# ---------------------------------------------------------------------------
# Game engine
# ---------------------------------------------------------------------------

class GameEngine:
    """Applies pitch events and inning transitions to a GameState."""

    def __init__(self, resolver: OutcomeResolver | None = None,
                 rules: GameRules | None = None):
        self.resolver = resolver or OutcomeResolver()
        self.rules = rules or GameRules()

    # -------------------------------------------------------------------
    # Plate appearance
    # -------------------------------------------------------------------

    def ensure_can_pitch(self, state: GameState) -> None:
        if state.is_game_over:
            raise InvalidGameStateError("The game is already over.")
        if state.current_batter is None or state.current_pitcher is None:
            raise InvalidGameStateError(
                "Current batter or pitcher is not set. Submit both lineups first."
            )
        if state.outs >= 3 and state.strikes == 0 and state.balls == 0:
            raise InvalidGameStateError(
                "Three outs recorded. Advance to the next half-inning."
            )

    def resolve(self, state: GameState, swung: bool, timing: float | None = None,
                pitch_type: PitchType = PitchType.STRIKE) -> Outcome:
        """Pick an outcome for one pitch without touching the state."""
        batter = state.current_batter
        pitcher = state.current_pitcher
        if not swung:
            return self.resolver.resolve_pitch(pitcher.control, pitch_type)
        if timing is None:
            timing = self.rules.default_timing

        if self.rules.swing_model == SwingModel.RATINGS:
            return self.resolver.resolve_swing(
                batter.contact, batter.power, pitcher.control, pitcher.speed, timing
            )
        location = self.resolver.resolve_pitch(pitcher.control, pitch_type)
        return self.resolver.resolve_swing_with_timing(
            True, batter.contact, pitcher.control, PitchType(location.value), timing
        )

    def play_pitch(self, state: GameState, swung: bool, timing: float | None = None,
                   pitch_type: PitchType = PitchType.STRIKE) -> Outcome:
        """Resolve and apply one pitch event. Returns the applied outcome."""
        self.ensure_can_pitch(state)
        outcome = self.resolve(state, swung, timing, pitch_type)
        logger.info(
            "Game %s: %s vs %s, %s -> %s",
            state.game_id, state.current_pitcher.name, state.current_batter.name,
            "swing" if swung else "take", outcome.value,
        )
        return self.apply_outcome(state, outcome)

    def apply_outcome(self, state: GameState, outcome: Outcome) -> Outcome:
        """Apply an outcome to the count, bases and score.

        A groundout can come back as DOUBLE_PLAY. The returned value is what
        actually happened.
        """
        batter = state.current_batter
        outs_before = state.outs
        score_before = state.home_score + state.away_score

        if outcome in (Outcome.STRIKE, Outcome.WHIFF):
            state.strikes += 1
        elif outcome == Outcome.BALL:
            state.balls += 1
        elif outcome == Outcome.FOUL:
            # A foul never strikes a batter out
            if state.strikes < 2:
                state.strikes += 1
        elif outcome in HIT_BASES:
            hit_bases = HIT_BASES[outcome]
            advance_runners(state, hit_bases)
            place_runner(state, hit_bases, batter)
            self._end_plate_appearance(state)
        elif outcome == Outcome.HOME_RUN:
            runs = state.runners_on_base() + 1
            batter.home_runs += 1
            batter.rbis += runs
            reset_bases(state)
            state.add_runs(runs)
            self._end_plate_appearance(state)
        elif outcome == Outcome.GROUNDOUT:
            outcome = self._ground_ball(state)
            self._end_plate_appearance(state)
        elif outcome == Outcome.DOUBLE_PLAY:
            if state.runner_on(1) is None:
                # Nobody to double up; only the batter is out
                state.outs += 1
                outcome = Outcome.GROUNDOUT
            else:
                self._double_play(state)
            self._end_plate_appearance(state)
        elif outcome in (Outcome.FLYOUT, Outcome.SWINGING_STRIKEOUT):
            state.outs += 1
            self._end_plate_appearance(state)
        else:
            raise ValueError(f"Unhandled outcome: {outcome!r}")

        completed = self.check_count(state, batter)
        runs = state.home_score + state.away_score - score_before
        self._log_play(state, outs_before, self._describe(batter, completed or outcome),
                       "pitch", runs, outcome)

        if state.half_inning_over():
            logger.info(
                "Game %s: three outs, half-inning ready to end. %s",
                state.game_id, state.score_display(),
            )
        self.check_game_over(state)
        return outcome

    def _ground_ball(self, state: GameState) -> Outcome:
        if state.outs < 2 and state.runner_on(1) is not None:
            if self.resolver.chance(self.rules.double_play_probability):
                self._double_play(state)
                return Outcome.DOUBLE_PLAY
            state.outs += 1
            runner = state.bases[1]
            state.bases[1] = None
            force_advance(state, runner, base=2)
            return Outcome.GROUNDOUT
        state.outs += 1
        return Outcome.GROUNDOUT

    def _double_play(self, state: GameState) -> None:
        state.bases[1] = None
        state.outs = min(state.outs + 2, 3)

    def check_count(self, state: GameState, batter: Batter | None) -> str | None:
        """Close out a strikeout or walk. Returns "strikeout", "walk" or None."""
        if state.strikes >= 3:
            state.outs += 1
            self._end_plate_appearance(state)
            return "strikeout"
        if state.balls >= 4:
            if batter is not None:
                force_advance(state, batter)
            self._end_plate_appearance(state)
            return "walk"
        return None

    def _end_plate_appearance(self, state: GameState) -> None:
        state.strikes = 0
        state.balls = 0
        self.advance_batting_order(state)

    def advance_batting_order(self, state: GameState) -> None:
        if not state.batting_order:
            logger.warning("Game %s: batting order is not set.", state.game_id)
            return
        state.current_batter_index = (state.current_batter_index + 1) % len(state.batting_order)
        state.current_batter = state.batting_order[state.current_batter_index]
        logger.info(
            "Game %s: now batting %s (#%d)",
            state.game_id, state.current_batter.name, state.current_batter_index + 1,
        )

    def move_runners(self, state: GameState, bases: int) -> int:
        """Advance every runner outside pitch resolution (steal, balk, wild pitch)."""
        if state.is_game_over:
            raise InvalidGameStateError("The game is already over.")
        if state.half_inning_over():
            raise InvalidGameStateError(
                "Three outs recorded. Advance to the next half-inning."
            )
        runs = advance_runners(state, bases)
        plural = "base" if bases == 1 else "bases"
        self._log_play(state, state.outs, f"Runners advance {bases} {plural}",
                       "baserunning", runs)
        logger.info("Game %s: runners advanced %d %s, %d run(s) scored",
                    state.game_id, bases, plural, runs)
        self.check_game_over(state)
        return runs

    # -------------------------------------------------------------------
    # Inning and game lifecycle
    # -------------------------------------------------------------------

    def advance_half_inning(self, state: GameState) -> GameState:
        if state.is_game_over:
            raise InvalidGameStateError("The game is already over.")
        if state.outs < 3:
            raise InvalidGameStateError(
                "The half-inning is not over yet (fewer than three outs)."
            )

        if state.half == Half.TOP:
            state.half = Half.BOTTOM
            state.current_pitcher = state.away_starting_pitcher
            state.batting_order = state.home_batting_order
        else:
            state.inning += 1
            state.half = Half.TOP
            state.current_pitcher = state.home_starting_pitcher
            state.batting_order = state.away_batting_order

        state.outs = 0
        state.strikes = 0
        state.balls = 0
        reset_bases(state)
        state.current_batter_index = 0
        state.current_batter = state.batting_order[0] if state.batting_order else None

        half_str = "Top" if state.half == Half.TOP else "Bottom"
        self._log_play(state, 0, f"--- {half_str} of the {ordinal(state.inning)} ---",
                       "half_inning")
        logger.info(
            "Game %s: %s of the %s, leading off %s",
            state.game_id, half_str, ordinal(state.inning),
            state.current_batter.name if state.current_batter else "nobody",
        )
        self.check_game_over(state)
        return state

    def check_game_over(self, state: GameState) -> bool:
        """End the game once the last scheduled half-inning finishes untied."""
        if state.is_game_over:
            return True
        if (state.inning >= state.max_innings and state.half == Half.BOTTOM
                and state.outs >= 3):
            if state.home_score != state.away_score:
                self.end_game(state)
                return True
            logger.info(
                "Game %s: tied after the %s, heading to extra innings.",
                state.game_id, ordinal(state.inning),
            )
        return False

    def end_game(self, state: GameState) -> GameState:
        if state.is_game_over:
            raise InvalidGameStateError("The game is already over.")
        state.is_game_over = True
        if state.home_score > state.away_score:
            state.winner = state.home_team
        elif state.away_score > state.home_score:
            state.winner = state.away_team
        else:
            state.winner = DRAW
        self._log_play(state, state.outs, f"Game over! Winner: {state.winner} "
                       f"({state.score_display()})", "game_end")
        logger.info("Game %s over. Winner: %s", state.game_id, state.winner)
        return state

    # -------------------------------------------------------------------
    # Play-by-play
    # -------------------------------------------------------------------

    def _describe(self, batter: Batter | None, result: Outcome | str) -> str:
        name = batter.name if batter else "Batter"
        label = result.label if isinstance(result, Outcome) else result
        return f"{name}: {label}"

    def _log_play(self, state: GameState, outs_before: int, description: str,
                  event_type: str, runs: int = 0, outcome: Outcome | None = None) -> None:
        if runs:
            description += f" [{state.score_display()}]"
        state.play_log.append(PlayEvent(
            inning=state.inning,
            half=state.half,
            outs_before=outs_before,
            description=description,
            event_type=event_type,
            score_home=state.home_score,
            score_away=state.away_score,
            runs_scored=runs,
            outcome=outcome,
        ))


def ordinal(n: int) -> str:
    """Return ordinal string for an integer (1st, 2nd, 3rd, etc.)."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


# ---------------------------------------------------------------------------
# Serialization and summaries
# ---------------------------------------------------------------------------

def game_state_to_dict(state: GameState) -> dict:
    """Serialize game state to a JSON-ready dict."""
    def name_of(player) -> str | None:
        return player.name if player is not None else None

    return {
        "game_id": state.game_id,
        "home_team": state.home_team,
        "away_team": state.away_team,
        "max_innings": state.max_innings,
        "inning": state.inning,
        "half": state.half.value,
        "outs": state.outs,
        "strikes": state.strikes,
        "balls": state.balls,
        "score": {"home": state.home_score, "away": state.away_score},
        "bases": {str(base): name_of(state.bases[base]) for base in (1, 2, 3)},
        "home_batting_order": [b.name for b in state.home_batting_order],
        "away_batting_order": [b.name for b in state.away_batting_order],
        "current_batter_index": state.current_batter_index,
        "current_batter": name_of(state.current_batter),
        "current_pitcher": name_of(state.current_pitcher),
        "home_starting_pitcher": name_of(state.home_starting_pitcher),
        "away_starting_pitcher": name_of(state.away_starting_pitcher),
        "game_over": state.is_game_over,
        "winner": state.winner,
        "play_log": [e.to_dict() for e in state.play_log],
    }


def stats_summary(state: GameState) -> str:
    """Human-readable summary of the current game situation."""
    half_str = "Top" if state.half == Half.TOP else "Bottom"
    lines = [
        f"Game ID: {state.game_id}",
        f"Inning: {half_str} of the {ordinal(state.inning)}, {state.batting_team()} batting",
        f"Score: {state.score_display()}",
        f"Outs: {state.outs}, Strikes: {state.strikes}, Balls: {state.balls}",
    ]
    runners = [f"{ordinal(base)}: {state.bases[base].name}"
               for base in (1, 2, 3) if state.bases[base] is not None]
    lines.append("Runners: " + (", ".join(runners) if runners else "none"))
    if state.current_batter is not None:
        b = state.current_batter
        lines.append(f"At bat: {b.name} (AVG {b.batting_average:.3f}, "
                     f"HR {b.home_runs}, RBI {b.rbis})")
    if state.current_pitcher is not None:
        p = state.current_pitcher
        lines.append(f"Pitching: {p.name} (ERA {p.era:.2f})")
    if state.is_game_over:
        lines.append(f"Game over! Winner: {state.winner}")
    return "\n".join(lines) + "\n"
