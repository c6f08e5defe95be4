# /// script
# requires-python = ">=3.12"
# dependencies = ["flask>=3.0", "pydantic>=2.0"]
# ///
"""HTTP API for the baseball game engine.

Exposes game creation, lineup submission, pitch events and inning control
as JSON endpoints under ``/api/baseball/game``.

Usage:
    uv run app.py
"""

from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from config import get_log_level, get_port, get_seed, require_rules
from errors import GameError, GameValidationError
from game_service import GameService
from models import (
    AdvanceRunnersRequest,
    CreateGameRequest,
    LineupRequest,
    PitchRequest,
    SwingRequest,
)
from outcomes import OutcomeResolver
from responses import error_response, game_error_response, success_response
from roster import Roster
from simulation import DRAW, GameEngine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

def create_service() -> GameService:
    """Build a GameService from the environment configuration."""
    engine = GameEngine(resolver=OutcomeResolver(seed=get_seed()), rules=require_rules())
    return GameService(Roster.from_file(), engine=engine)


def create_app(service: GameService | None = None) -> Flask:
    app = Flask(__name__)
    app.extensions["game_service"] = service or create_service()
    register_routes(app)
    return app


def _service() -> GameService:
    return current_app.extensions["game_service"]


def _parse(model: type[BaseModel]) -> BaseModel:
    """Validate the JSON body against ``model``."""
    data = request.get_json(silent=True) or {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        details = [
            f"{'.'.join(str(p) for p in err.get('loc', ())) or 'body'}: {err.get('msg', '?')}"
            for err in e.errors()
        ]
        raise GameValidationError("Invalid request body.", details=details) from None


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

def register_routes(app: Flask) -> None:

    @app.errorhandler(GameError)
    def handle_game_error(exc: GameError):
        body, status = game_error_response(exc)
        logger.info("Request failed (%s): %s", exc.error_code, exc.message)
        return jsonify(body), status

    @app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify(error_response("NOT_FOUND", "No such endpoint.")), 404

    @app.route("/api/baseball/game", methods=["POST"])
    def api_create_game():
        req = _parse(CreateGameRequest)
        service = _service()
        state = service.create_game(req.home_team, req.away_team, req.max_innings)
        return jsonify(success_response("Game created.", service.snapshot(state.game_id))), 201

    @app.route("/api/baseball/game/<game_id>", methods=["GET"])
    def api_get_game(game_id: str):
        return jsonify(success_response("Game found.", _service().snapshot(game_id)))

    @app.route("/api/baseball/game/<game_id>", methods=["DELETE"])
    def api_delete_game(game_id: str):
        _service().delete_game(game_id)
        return jsonify(success_response("Game deleted."))

    @app.route("/api/baseball/game/<game_id>/lineup", methods=["POST"])
    def api_submit_lineup(game_id: str):
        req = _parse(LineupRequest)
        game = _service().submit_lineup(
            game_id, req.team_name, req.batting_order, req.starting_pitcher
        )
        return jsonify(success_response(f"Lineup set for {req.team_name}.", game))

    @app.route("/api/baseball/game/<game_id>/batter", methods=["POST"])
    def api_batter_swing(game_id: str):
        req = _parse(SwingRequest)
        outcome, game = _service().pitch(game_id, req.swing, req.timing, req.pitch_type)
        return jsonify(success_response(outcome.label.capitalize() + ".", game,
                                        result=outcome.value))

    @app.route("/api/baseball/game/<game_id>/pitcher", methods=["POST"])
    def api_pitcher_throw(game_id: str):
        req = _parse(PitchRequest)
        outcome, game = _service().pitcher_throw(game_id, req.pitch_type)
        return jsonify(success_response(outcome.label.capitalize() + ".", game,
                                        result=outcome.value))

    @app.route("/api/baseball/game/<game_id>/next-inning", methods=["POST"])
    def api_next_inning(game_id: str):
        game = _service().advance_half_inning(game_id)
        message = "Moving to the next half-inning."
        if game["game_over"]:
            message = f"Game over. Winner: {game['winner']}"
        return jsonify(success_response(message, game))

    @app.route("/api/baseball/game/<game_id>/end", methods=["POST"])
    def api_end_game(game_id: str):
        game = _service().end_game(game_id)
        if game["winner"] == DRAW:
            message = "Game over. The game ended in a draw."
        else:
            message = f"Game over. Winner: {game['winner']}"
        return jsonify(success_response(message, game))

    @app.route("/api/baseball/game/<game_id>/advance-runners", methods=["POST"])
    def api_advance_runners(game_id: str):
        req = _parse(AdvanceRunnersRequest)
        runs, game = _service().advance_runners(game_id, req.bases)
        plural = "base" if req.bases == 1 else "bases"
        return jsonify(success_response(f"Runners advanced {req.bases} {plural}.", game,
                                        runs_scored=runs))

    @app.route("/api/baseball/game/<game_id>/stats", methods=["GET"])
    def api_game_stats(game_id: str):
        stats = _service().get_stats(game_id)
        return jsonify(success_response("Game stats.", stats=stats))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    app.run(debug=True, host="0.0.0.0", port=get_port(), threaded=True)
