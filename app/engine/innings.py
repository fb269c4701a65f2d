"""
Innings lifecycle - when an innings ends and how the second one starts.
"""
import enum
from dataclasses import replace
from typing import Optional

from app.engine.state import InningsState, ActiveState

DEFAULT_WICKET_CAP = 10


class InningsEndReason(str, enum.Enum):
    ALL_OUT = "all_out"
    OVERS_COMPLETE = "overs_complete"
    TARGET_REACHED = "target_reached"


def wicket_cap(roster_size: Optional[int]) -> int:
    """
    Wickets that end an innings: one fewer than the registered batters when
    the roster is known, otherwise the standard ten.
    """
    if roster_size is None or roster_size < 2:
        return DEFAULT_WICKET_CAP
    return roster_size - 1


def new_innings(
    innings_no: int,
    batting_team_id: int,
    bowling_team_id: int,
    overs_limit: int,
    roster_size: Optional[int] = None,
    target: Optional[int] = None,
) -> InningsState:
    return InningsState(
        innings_no=innings_no,
        batting_team_id=batting_team_id,
        bowling_team_id=bowling_team_id,
        overs_limit=overs_limit,
        target=target,
        wicket_cap=wicket_cap(roster_size),
    )


def evaluate(innings: InningsState) -> Optional[InningsEndReason]:
    """Check termination after a delivery. Returns None while play continues."""
    if innings.innings_no == 2 and innings.target is not None and innings.runs >= innings.target:
        return InningsEndReason.TARGET_REACHED
    if innings.wickets >= innings.wicket_cap:
        return InningsEndReason.ALL_OUT
    if innings.legal_balls >= innings.max_balls:
        return InningsEndReason.OVERS_COMPLETE
    return None


def close_if_ended(innings: InningsState) -> InningsState:
    reason = evaluate(innings)
    if reason is None:
        return innings
    return replace(innings, is_complete=True, end_reason=reason.value)


def setup_second_innings(first: InningsState, roster_size: Optional[int] = None) -> tuple[InningsState, ActiveState]:
    """Swap the batting side, clear the crease and set the target."""
    second = new_innings(
        innings_no=2,
        batting_team_id=first.bowling_team_id,
        bowling_team_id=first.batting_team_id,
        overs_limit=first.overs_limit,
        roster_size=roster_size,
        target=first.runs + 1,
    )
    return second, ActiveState()
