# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Auto-play a full game between two roster teams.

Swing decisions, timing and pitch intent are drawn from a seeded random
source, so the same seed replays the same game.

Usage:
    uv run play.py --seed 42
    uv run play.py --home "Harbor Hawks" --away "Valley Rams" --innings 9 -v
"""

from __future__ import annotations

import argparse
import logging
import random
import sys

from config import get_log_level, require_rules
from errors import GameError
from game_service import GameService
from models import Half, PitchType
from outcomes import OutcomeResolver, clamp
from roster import Roster
from simulation import GameEngine, GameState


def play_game(service: GameService, home: str, away: str, innings: int,
              decision_rng: random.Random, inning_cap: int | None = None,
              echo=None) -> GameState:
    """Create a game, submit default lineups and play until it ends."""
    state = service.create_game(home, away, innings)
    for team in (away, home):
        order, pitcher = service.roster.default_lineup(team)
        service.submit_lineup(state.game_id, team, order, pitcher)

    printed = 0
    while not state.is_game_over:
        if state.outs >= 3:
            if inning_cap is not None and state.inning >= inning_cap and state.half == Half.BOTTOM:
                service.end_game(state.game_id)
            else:
                service.advance_half_inning(state.game_id)
        else:
            swung = decision_rng.random() < 0.55
            timing = clamp(decision_rng.gauss(0.5, 0.15))
            pitch_type = PitchType.STRIKE if decision_rng.random() < 0.6 else PitchType.BALL
            service.pitch(state.game_id, swung, timing if swung else None, pitch_type)

        if echo is not None:
            for event in state.play_log[printed:]:
                echo(f"  [{event.half.value[:3]} {event.inning}] {event.description}")
            printed = len(state.play_log)
    return state


def main() -> int:
    parser = argparse.ArgumentParser(description="Auto-play a baseball game.")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for outcomes and decisions (default: random).")
    parser.add_argument("--home", default=None, help="Home team name.")
    parser.add_argument("--away", default=None, help="Away team name.")
    parser.add_argument("--innings", type=int, default=9, help="Scheduled innings.")
    parser.add_argument("--inning-cap", type=int, default=None, metavar="N",
                        help="Call the game after the bottom of inning N even if tied.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print the play-by-play.")
    args = parser.parse_args()

    logging.basicConfig(
        level=get_log_level() if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        roster = Roster.from_file()
    except (OSError, ValueError) as e:
        print(f"Error loading roster: {e}", file=sys.stderr)
        return 1

    teams = roster.team_names()
    if len(teams) < 2 and (args.home is None or args.away is None):
        print("Error: roster needs at least two teams.", file=sys.stderr)
        return 1
    home = args.home or teams[0]
    away = args.away or teams[1]

    seed = args.seed if args.seed is not None else random.randint(0, 2**31 - 1)
    engine = GameEngine(resolver=OutcomeResolver(seed=seed), rules=require_rules())
    service = GameService(roster, engine=engine)

    print(f"Playing game with seed {seed}...")
    print(f"{away} at {home}")
    print("=" * 72)

    try:
        state = play_game(service, home, away, args.innings, random.Random(seed + 1),
                          inning_cap=args.inning_cap,
                          echo=print if args.verbose else None)
    except (GameError, KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print()
    print(service.get_stats(state.game_id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
