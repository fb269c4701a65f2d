"""
Over tracking - ball numbering, over completion and the bowler change rule.

All ball arithmetic works off the legal-ball counter alone; wides and
no-balls never move it.
"""
from dataclasses import replace
from typing import Optional

from app.engine.errors import BowlerRepeatError
from app.engine.state import ActiveState

BALLS_PER_OVER = 6


def over_and_ball(legal_balls: int) -> tuple[int, int]:
    """Completed overs and balls into the current over, e.g. 14 -> (2, 2)"""
    return divmod(legal_balls, BALLS_PER_OVER)


def overs_display(legal_balls: int) -> str:
    overs, balls = over_and_ball(legal_balls)
    return f"{overs}.{balls}"


def event_position(legal_balls_before: int) -> tuple[int, int]:
    """
    (over_no, ball_no) recorded on a delivery, given the legal balls bowled
    before it. over_no is zero-based, ball_no runs 1-6; the sixth legal ball
    of an over is numbered 6 rather than rolling into the next over. An
    illegal delivery carries the number of the ball still to come.
    """
    overs, balls = over_and_ball(legal_balls_before)
    return overs, balls + 1


def is_over_complete(legal_balls: int) -> bool:
    return legal_balls > 0 and legal_balls % BALLS_PER_OVER == 0


def complete_over(active: ActiveState) -> ActiveState:
    """
    End-of-over bookkeeping: batters change ends, the finishing bowler is
    barred from the next over and the bowler slot is emptied until a new
    bowler is chosen.
    """
    return replace(
        active,
        striker_id=active.non_striker_id,
        non_striker_id=active.striker_id,
        bowler_id=None,
        last_bowler_id=active.bowler_id,
    )


def check_bowler_change(active: ActiveState, new_bowler_id: Optional[int]) -> None:
    if new_bowler_id is not None and new_bowler_id == active.last_bowler_id:
        raise BowlerRepeatError(f"Player {new_bowler_id} bowled the previous over")
