# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitch and swing outcome resolution.

Maps pitcher and batter ratings, pitch intent and swing timing to an
Outcome. Timing is a float in [0, 1] where 0.5 is a perfectly timed swing.

All randomness comes from the ``random.Random`` handed to the resolver, so
a seeded resolver replays the same sequence of outcomes.
"""

from __future__ import annotations

import random

from models import Outcome, PitchType


# Timing bands for balls put in play
PERFECT_TIMING = (0.45, 0.55)
GOOD_TIMING = (0.35, 0.65)

# Cumulative cutoffs per band: groundout, flyout, single, double, triple;
# anything above the last cutoff is a home run.
_LADDER_OUTCOMES = (
    Outcome.GROUNDOUT,
    Outcome.FLYOUT,
    Outcome.SINGLE,
    Outcome.DOUBLE,
    Outcome.TRIPLE,
)
PERFECT_LADDER = (0.10, 0.30, 0.55, 0.75, 0.90)
GOOD_LADDER = (0.15, 0.55, 0.75, 0.85, 0.95)
POOR_LADDER = (0.20, 0.70, 0.80, 0.90, 0.97)

# (exclusive lower bound, outcome), checked top-down
SCORE_THRESHOLDS = (
    (95, Outcome.HOME_RUN),
    (90, Outcome.TRIPLE),
    (80, Outcome.DOUBLE),
    (60, Outcome.SINGLE),
    (40, Outcome.GROUNDOUT),
    (20, Outcome.FLYOUT),
)


def clamp(v: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, v))


def timing_weight(timing: float) -> float:
    """1.0 for a perfectly timed swing, 0.0 at either extreme."""
    return 1.0 - abs(timing - 0.5) * 2


def outcome_for_score(final_score: float) -> Outcome:
    """Look up the batted-ball outcome for a final swing score."""
    for threshold, outcome in SCORE_THRESHOLDS:
        if final_score > threshold:
            return outcome
    return Outcome.SWINGING_STRIKEOUT


def swing_score(contact: float, power: float, control: float, speed: float,
                timing: float) -> float:
    """Combine batter and pitcher ratings with timing into one score."""
    batter_score = contact * 0.6 + power * 0.4
    pitcher_score = control * 0.5 + speed * 0.5
    final_score = (batter_score - pitcher_score) * 0.5 + 50
    return final_score * (0.7 + timing_weight(timing) * 0.6)


def strike_zone_miss_chance(timing: float) -> float:
    """Whiff probability on a swing at a pitch in the zone."""
    if timing < 0.3 or timing > 0.7:
        return 0.4
    if timing < 0.4 or timing > 0.6:
        return 0.2
    if timing < 0.45 or timing > 0.55:
        return 0.1
    return 0.05


def chase_contact_chance(contact: float) -> float:
    """Probability of making contact on a swing at a ball."""
    return clamp(0.1 + (contact - 50) * 0.01, 0.05, 0.8)


def timing_ladder(timing: float) -> tuple[float, ...]:
    if PERFECT_TIMING[0] <= timing <= PERFECT_TIMING[1]:
        return PERFECT_LADDER
    if GOOD_TIMING[0] <= timing <= GOOD_TIMING[1]:
        return GOOD_LADDER
    return POOR_LADDER


class OutcomeResolver:
    """Resolves pitches and swings using an injected random source."""

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        if rng is None:
            if seed is None:
                seed = random.randint(0, 2**31 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng

    # -------------------------------------------------------------------
    # Pitch resolution
    # -------------------------------------------------------------------

    def resolve_pitch(self, control: float, intended: PitchType) -> Outcome:
        """Resolve where a pitch lands given the pitcher's control.

        Control 50 hits the intended spot 70% of the time, control 100
        always does, control 0 only 40% of the time. A missed spot flips
        the result: an intended strike becomes a ball and vice versa.
        """
        accuracy = clamp(0.7 + (control - 50) * 0.006, 0.4, 1.0)
        lands_as_intended = self.rng.random() < accuracy
        if intended == PitchType.STRIKE:
            return Outcome.STRIKE if lands_as_intended else Outcome.BALL
        return Outcome.BALL if lands_as_intended else Outcome.STRIKE

    # -------------------------------------------------------------------
    # Swing resolution
    # -------------------------------------------------------------------

    def resolve_swing(self, contact: float, power: float, control: float,
                      speed: float, timing: float) -> Outcome:
        """Resolve a swing from batter and pitcher ratings.

        Deterministic: no random draw is made.
        """
        return outcome_for_score(swing_score(contact, power, control, speed, timing))

    def resolve_swing_with_timing(self, swung: bool, contact: float,
                                  control: float, pitch_type: PitchType,
                                  timing: float) -> Outcome:
        """Resolve a pitch where the batter may or may not swing.

        ``pitch_type`` is the intent passed to :meth:`resolve_pitch` for a
        taken pitch, and the actual location for a swing.
        """
        if not swung:
            return self.resolve_pitch(control, pitch_type)

        if pitch_type == PitchType.BALL:
            if self.rng.random() < chase_contact_chance(contact):
                return self.resolve_by_timing(timing)
            return Outcome.WHIFF

        if self.rng.random() < strike_zone_miss_chance(timing):
            return Outcome.WHIFF
        return self.resolve_by_timing(timing)

    def resolve_by_timing(self, timing: float) -> Outcome:
        """Pick a batted-ball outcome; worse timing skews toward outs."""
        roll = self.rng.random()
        for cutoff, outcome in zip(timing_ladder(timing), _LADDER_OUTCOMES):
            if roll <= cutoff:
                return outcome
        return Outcome.HOME_RUN

    def chance(self, probability: float) -> bool:
        """Single Bernoulli draw, used for the double-play roll."""
        return self.rng.random() < probability
