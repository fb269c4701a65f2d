"""
Delivery processing - applies one ball to the innings and the crease.
"""
from dataclasses import replace
from typing import Optional

from app.engine.errors import InningsEndedError, MissingPlayersError, SamePlayerError, InvalidDeliveryError
from app.engine.extras import BallType, classify
from app.engine.innings import close_if_ended
from app.engine.overs import event_position, is_over_complete, complete_over
from app.engine.state import InningsState, ActiveState, DeliveryEvent
from app.models.match import WicketType

DEFAULT_WICKET_TYPE = WicketType.CAUGHT


def check_ready(innings: InningsState, active: ActiveState) -> None:
    """Raise if the next delivery cannot be accepted."""
    if innings.is_complete:
        raise InningsEndedError(f"Innings {innings.innings_no} has ended ({innings.end_reason})")
    missing = active.missing_slots()
    if missing:
        raise MissingPlayersError(missing)
    if active.striker_id == active.non_striker_id:
        raise SamePlayerError()


def _resolve_wicket_type(is_wicket: bool, wicket_type: Optional[WicketType]) -> WicketType:
    if wicket_type is None:
        wicket_type = WicketType.NONE
    try:
        wicket_type = WicketType(wicket_type)
    except ValueError:
        raise InvalidDeliveryError(f"Unknown wicket type: {wicket_type!r}") from None

    if not is_wicket:
        if wicket_type != WicketType.NONE:
            raise InvalidDeliveryError("wicket_type given for a delivery without a wicket")
        return WicketType.NONE
    if wicket_type == WicketType.NONE:
        return DEFAULT_WICKET_TYPE
    return wicket_type


def apply_delivery(
    innings: InningsState,
    active: ActiveState,
    ball_type: BallType,
    runs: int,
    is_wicket: bool = False,
    wicket_type: Optional[WicketType] = None,
) -> tuple[InningsState, ActiveState, DeliveryEvent]:
    """
    Apply one delivery. Returns the new innings, the new crease and the
    event to record; the inputs are left untouched. Nothing is returned
    (and nothing changes) if any check fails.
    """
    check_ready(innings, active)
    effect = classify(ball_type, runs, is_wicket)
    kind = _resolve_wicket_type(is_wicket, wicket_type)

    over_no, ball_no = event_position(innings.legal_balls)
    event = DeliveryEvent(
        innings_no=innings.innings_no,
        over_no=over_no,
        ball_no=ball_no,
        striker_id=active.striker_id,
        non_striker_id=active.non_striker_id,
        bowler_id=active.bowler_id,
        batter_runs=effect.batter_runs,
        extra_runs=effect.extra_runs,
        extra_type=effect.extra_type,
        wicket_type=kind,
        dismissed_player_id=active.striker_id if is_wicket else None,
    )

    updated = replace(
        innings,
        runs=innings.runs + effect.runs_to_total,
        wickets=innings.wickets + (1 if is_wicket else 0),
        legal_balls=innings.legal_balls + (1 if effect.is_legal_ball else 0),
    )

    striker, non_striker = active.striker_id, active.non_striker_id
    if effect.swaps_strike:
        striker, non_striker = non_striker, striker
    if is_wicket:
        # The survivor stays where they are; the new batter walks in on strike
        striker = None
    crease = replace(active, striker_id=striker, non_striker_id=non_striker)

    if effect.is_legal_ball and is_over_complete(updated.legal_balls):
        crease = complete_over(crease)

    return close_if_ended(updated), crease, event
