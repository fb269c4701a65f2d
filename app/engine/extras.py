"""
Extras classification - what a declared ball type does to the score.
"""
import enum
from dataclasses import dataclass

from app.engine.errors import InvalidDeliveryError
from app.models.match import ExtraType

MAX_RUNS_PER_BALL = 6


class BallType(str, enum.Enum):
    RUN = "RUN"
    WIDE = "WIDE"
    NO_BALL = "NO_BALL"
    BYE = "BYE"
    LEG_BYE = "LEG_BYE"


EXTRA_TYPES = {
    BallType.RUN: ExtraType.NONE,
    BallType.WIDE: ExtraType.WIDE,
    BallType.NO_BALL: ExtraType.NO_BALL,
    BallType.BYE: ExtraType.BYE,
    BallType.LEG_BYE: ExtraType.LEG_BYE,
}


@dataclass(frozen=True)
class ExtrasEffect:
    """Effect of a single ball on the score and the batters"""
    runs_to_total: int
    batter_runs: int
    extra_runs: int
    extra_type: ExtraType
    is_legal_ball: bool
    swaps_strike: bool


def classify(ball_type: BallType, runs: int, is_wicket: bool = False) -> ExtrasEffect:
    """
    Map a declared delivery to its run, legality and strike effects.

    WIDE: 1 + runs, all extras, never legal, never swaps.
    NO_BALL: 1 penalty extra plus runs off the bat, not legal, swaps on odd bat runs.
    BYE / LEG_BYE: runs as extras, legal, swaps on odd runs.
    RUN: runs off the bat, legal, swaps on odd runs.

    A wicket never swaps; the striker's slot is vacated instead.
    """
    try:
        ball_type = BallType(ball_type)
    except ValueError:
        raise InvalidDeliveryError(f"Unknown ball type: {ball_type!r}") from None
    if not 0 <= runs <= MAX_RUNS_PER_BALL:
        raise InvalidDeliveryError(f"Runs must be between 0 and {MAX_RUNS_PER_BALL}, got {runs}")

    if ball_type == BallType.WIDE:
        batter_runs, extra_runs = 0, 1 + runs
    elif ball_type == BallType.NO_BALL:
        batter_runs, extra_runs = runs, 1
    elif ball_type in (BallType.BYE, BallType.LEG_BYE):
        batter_runs, extra_runs = 0, runs
    else:
        batter_runs, extra_runs = runs, 0

    is_legal = ball_type not in (BallType.WIDE, BallType.NO_BALL)
    swaps = ball_type != BallType.WIDE and not is_wicket and runs % 2 == 1

    return ExtrasEffect(
        runs_to_total=batter_runs + extra_runs,
        batter_runs=batter_runs,
        extra_runs=extra_runs,
        extra_type=EXTRA_TYPES[ball_type],
        is_legal_ball=is_legal,
        swaps_strike=swaps,
    )
