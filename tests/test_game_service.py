# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the game service operations.

Verifies:
1. Game creation validates team names and innings
2. Lineup submission checks roster membership and teams
3. The game starts once both lineups are in
4. Pitch, throw and runner operations go through the engine
5. Errors leave the stored game untouched
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

import game_service
from config import GameRules
from errors import GameNotFoundError, GameValidationError, InvalidGameStateError
from game_service import GameService
from models import Half, Outcome, PitchType
from outcomes import OutcomeResolver
from roster import Roster
from simulation import DRAW, GameEngine, game_state_to_dict, place_runner


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class ScriptedRandom:
    """Stands in for random.Random, returning queued values from random()."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        if not self.values:
            raise AssertionError("unexpected random draw")
        return self.values.pop(0)


def make_roster_data():
    def team(name, prefix):
        return {
            "team_name": name,
            "batters": [
                {"name": f"{prefix} {i + 1}", "contact": 50, "power": 50}
                for i in range(10)
            ],
            "pitchers": [
                {"name": f"{prefix} Ace", "control": 50, "speed": 50, "era": 3.10},
                {"name": f"{prefix} Reliever", "control": 40, "speed": 60},
            ],
        }
    return {"teams": [team("Home", "Home"), team("Away", "Away")]}


def make_service(*rolls, **rules):
    engine = GameEngine(resolver=OutcomeResolver(rng=ScriptedRandom(rolls)),
                        rules=GameRules(**rules))
    return GameService(Roster(make_roster_data()), engine=engine)


def lineup(prefix, count=9):
    return [f"{prefix} {i + 1}" for i in range(count)]


def make_ready_game(service):
    state = service.create_game("Home", "Away")
    service.submit_lineup(state.game_id, "Away", lineup("Away"), "Away Ace")
    service.submit_lineup(state.game_id, "Home", lineup("Home"), "Home Ace")
    return state


# ===========================================================================
# Game creation
# ===========================================================================

class TestCreateGame:
    def test_creates_and_stores(self):
        service = make_service()
        state = service.create_game("Home", "Away", 7)
        assert service.get_game(state.game_id) is state
        assert state.max_innings == 7
        assert (state.inning, state.half) == (1, Half.TOP)
        assert state.current_batter is None

    def test_strips_team_names(self):
        state = make_service().create_game("  Home ", "Away")
        assert state.home_team == "Home"

    @pytest.mark.parametrize("home,away", [("", "Away"), ("Home", "   "), ("Home", "Home")])
    def test_rejects_bad_team_names(self, home, away):
        service = make_service()
        with pytest.raises(GameValidationError):
            service.create_game(home, away)
        assert len(service.store) == 0

    def test_rejects_zero_innings(self):
        with pytest.raises(GameValidationError):
            make_service().create_game("Home", "Away", 0)

    def test_unknown_game(self):
        with pytest.raises(GameNotFoundError) as exc_info:
            make_service().get_game("nope")
        assert exc_info.value.error_code == "GAME_NOT_FOUND"

    def test_blank_game_id(self):
        with pytest.raises(GameValidationError):
            make_service().get_game("  ")

    def test_delete(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        service.delete_game(state.game_id)
        with pytest.raises(GameNotFoundError):
            service.get_game(state.game_id)
        with pytest.raises(GameNotFoundError):
            service.delete_game(state.game_id)

    def test_games_are_independent(self):
        service = make_service()
        a = make_ready_game(service)
        b = service.create_game("Home", "Away")
        service.advance_runners(a.game_id, 1)
        assert a.game_id != b.game_id
        assert b.play_log == []


# ===========================================================================
# Lineups
# ===========================================================================

class TestSubmitLineup:
    def test_first_lineup_does_not_start_game(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        service.submit_lineup(state.game_id, "Away", lineup("Away"), "Away Ace")
        assert [b.name for b in state.away_batting_order] == lineup("Away")
        assert state.away_starting_pitcher.name == "Away Ace"
        assert state.current_batter is None
        assert state.current_pitcher is None

    def test_both_lineups_start_top_of_first(self):
        service = make_service()
        state = make_ready_game(service)
        assert state.current_batter.name == "Away 1"
        assert state.current_pitcher.name == "Home Ace"
        assert state.batting_order is state.away_batting_order
        assert state.current_batter_index == 0

    def test_home_first_then_away(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        service.submit_lineup(state.game_id, "Home", lineup("Home"), "Home Reliever")
        service.submit_lineup(state.game_id, "Away", lineup("Away", 3), "Away Ace")
        assert state.current_batter.name == "Away 1"
        assert state.current_pitcher.name == "Home Reliever"
        assert len(state.batting_order) == 3

    def test_resubmission_rejected(self):
        service = make_service()
        state = make_ready_game(service)
        with pytest.raises(InvalidGameStateError):
            service.submit_lineup(state.game_id, "Away", lineup("Away"), "Away Reliever")
        assert state.away_starting_pitcher.name == "Away Ace"

    def test_empty_order(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        with pytest.raises(GameValidationError):
            service.submit_lineup(state.game_id, "Away", [], "Away Ace")

    def test_unknown_team(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        with pytest.raises(GameValidationError) as exc_info:
            service.submit_lineup(state.game_id, "Elsewhere", lineup("Away"), "Away Ace")
        assert exc_info.value.field == "team_name"

    def test_missing_batters_listed(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        order = lineup("Away", 8) + ["Nobody"]
        with pytest.raises(GameValidationError) as exc_info:
            service.submit_lineup(state.game_id, "Away", order, "Away Ace")
        assert exc_info.value.details == ["Nobody"]
        assert state.away_batting_order == []

    def test_batter_from_other_team(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        order = lineup("Away", 8) + ["Home 1"]
        with pytest.raises(GameValidationError) as exc_info:
            service.submit_lineup(state.game_id, "Away", order, "Away Ace")
        assert exc_info.value.field == "batting_order"

    def test_pitcher_from_other_team(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        with pytest.raises(GameValidationError) as exc_info:
            service.submit_lineup(state.game_id, "Away", lineup("Away"), "Home Ace")
        assert exc_info.value.field == "starting_pitcher"

    def test_unknown_pitcher(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        with pytest.raises(GameValidationError):
            service.submit_lineup(state.game_id, "Away", lineup("Away"), "Ghost")

    def test_lineup_after_game_over(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        service.end_game(state.game_id)
        with pytest.raises(InvalidGameStateError):
            service.submit_lineup(state.game_id, "Away", lineup("Away"), "Away Ace")

    def test_unknown_game(self):
        with pytest.raises(GameNotFoundError):
            make_service().submit_lineup("nope", "Away", lineup("Away"), "Away Ace")


# ===========================================================================
# Pitch events
# ===========================================================================

class TestPitch:
    def test_pitch_before_lineups(self):
        service = make_service()
        state = service.create_game("Home", "Away")
        with pytest.raises(InvalidGameStateError):
            service.pitch(state.game_id, swung=False)

    def test_take(self):
        service = make_service(0.1)
        state = make_ready_game(service)
        outcome, game = service.pitch(state.game_id, swung=False)
        assert outcome == Outcome.STRIKE
        assert state.strikes == 1
        assert game["strikes"] == 1

    def test_swing(self):
        service = make_service(0.1, 0.5, 0.95)
        state = make_ready_game(service)
        outcome, game = service.pitch(state.game_id, swung=True, timing=0.5)
        assert outcome == Outcome.HOME_RUN
        assert state.away_score == 1
        assert game["score"] == {"home": 0, "away": 1}

    @pytest.mark.parametrize("timing", [-0.1, 1.01])
    def test_rejects_timing_out_of_range(self, timing):
        service = make_service()
        state = make_ready_game(service)
        with pytest.raises(GameValidationError):
            service.pitch(state.game_id, swung=True, timing=timing)
        assert state.play_log == []

    def test_pitcher_throw_ball(self):
        service = make_service(0.1)
        state = make_ready_game(service)
        outcome, _ = service.pitcher_throw(state.game_id, PitchType.BALL)
        assert outcome == Outcome.BALL
        assert state.balls == 1

    def test_roster_tallies_not_shared_between_games(self):
        service = make_service(0.1, 0.5, 0.95)
        state = make_ready_game(service)
        service.pitch(state.game_id, swung=True, timing=0.5)
        assert state.away_batting_order[0].home_runs == 1
        assert service.roster.find_batter("Away 1").home_runs == 0
        other = make_ready_game(service)
        assert other.away_batting_order[0].home_runs == 0

    def test_pitch_after_three_outs_needs_advance(self):
        service = make_service()
        state = make_ready_game(service)
        state.outs = 3
        with pytest.raises(InvalidGameStateError):
            service.pitch(state.game_id, swung=False)
        service.advance_half_inning(state.game_id)
        assert state.half == Half.BOTTOM
        assert state.current_batter.name == "Home 1"
        assert state.current_pitcher.name == "Away Ace"


# ===========================================================================
# Runners and lifecycle
# ===========================================================================

class TestRunnersAndLifecycle:
    @pytest.mark.parametrize("bases", [0, 5, None])
    def test_advance_runners_validation(self, bases):
        service = make_service()
        state = make_ready_game(service)
        with pytest.raises(GameValidationError):
            service.advance_runners(state.game_id, bases)

    def test_advance_runners_scores(self):
        service = make_service()
        state = make_ready_game(service)
        place_runner(state, 2, state.away_batting_order[4])
        place_runner(state, 1, state.away_batting_order[5])
        runs, game = service.advance_runners(state.game_id, 2)
        assert runs == 1
        assert game["bases"]["3"] == "Away 6"
        assert state.away_score == 1
        assert state.bases[3].name == "Away 6"

    def test_advance_half_inning_too_early(self):
        service = make_service()
        state = make_ready_game(service)
        with pytest.raises(InvalidGameStateError):
            service.advance_half_inning(state.game_id)

    def test_end_game(self):
        service = make_service()
        state = make_ready_game(service)
        state.home_score = 2
        service.end_game(state.game_id)
        assert state.is_game_over
        assert state.winner == "Home"
        with pytest.raises(InvalidGameStateError):
            service.end_game(state.game_id)

    def test_end_game_tied_is_draw(self):
        service = make_service()
        state = make_ready_game(service)
        assert service.end_game(state.game_id)["winner"] == DRAW

    def test_get_stats(self):
        service = make_service()
        state = make_ready_game(service)
        stats = service.get_stats(state.game_id)
        assert state.game_id in stats
        assert "At bat: Away 1" in stats
        assert "Pitching: Home Ace (ERA 3.10)" in stats

    def test_get_stats_unknown_game(self):
        with pytest.raises(GameNotFoundError):
            make_service().get_stats("nope")

    def test_advance_runners_after_third_out(self):
        service = make_service()
        state = make_ready_game(service)
        place_runner(state, 3, state.away_batting_order[4])
        state.outs = 3
        with pytest.raises(InvalidGameStateError):
            service.advance_runners(state.game_id, 1)
        assert state.away_score == 0
        assert state.bases[3] is not None


# ===========================================================================
# Snapshots
# ===========================================================================

class TestSnapshots:
    def test_serialized_while_holding_game_lock(self, monkeypatch):
        service = make_service(0.1)
        state = make_ready_game(service)
        lock = service.store._lock_for(state.game_id)
        held = []

        def recording(game):
            held.append(lock.locked())
            return game_state_to_dict(game)

        monkeypatch.setattr(game_service, "game_state_to_dict", recording)
        service.pitch(state.game_id, swung=False)
        service.advance_runners(state.game_id, 1)
        service.snapshot(state.game_id)
        state.outs = 3
        service.advance_half_inning(state.game_id)
        service.end_game(state.game_id)
        assert held == [True] * 5
        assert not lock.locked()

    def test_snapshot_is_detached_from_live_state(self):
        service = make_service(0.1)
        state = make_ready_game(service)
        _, game = service.pitch(state.game_id, swung=False)
        state.strikes = 2
        state.play_log.clear()
        assert game["strikes"] == 1
        assert len(game["play_log"]) == 1

    def test_snapshot_unknown_game(self):
        with pytest.raises(GameNotFoundError):
            make_service().snapshot("nope")

    def test_snapshot_blank_id(self):
        with pytest.raises(GameValidationError):
            make_service().snapshot(" ")
