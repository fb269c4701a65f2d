from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from app.auth.utils import require_scorer
from app.database import get_db
from app.engine.aggregator import BattingStats, BowlingStats, Scorecard
from app.engine.match_engine import MatchEngine, MatchView, DeliveryOutcome
from app.engine.result import MatchResult
from app.engine.state import InningsState, ActiveState
from app.api.schemas import (
    MatchCreateRequest, TossRequest, PlayersRequest, DeliveryRequest,
    MatchResponse, MatchStateResponse, InningsResponse, CreaseResponse,
    DeliveryEventResponse, DeliveryResultResponse, ResultResponse,
    BattingStatsResponse, BowlingStatsResponse, ScorecardResponse, PlayerStatsResponse,
)

router = APIRouter(prefix="/matches", tags=["Live Scoring"])


def _innings_response(innings: Optional[InningsState]) -> Optional[InningsResponse]:
    if innings is None:
        return None
    return InningsResponse(
        innings_no=innings.innings_no,
        batting_team_id=innings.batting_team_id,
        bowling_team_id=innings.bowling_team_id,
        runs=innings.runs,
        wickets=innings.wickets,
        legal_balls=innings.legal_balls,
        overs=innings.overs_display,
        run_rate=round(innings.run_rate, 2),
        target=innings.target,
        runs_required=innings.runs_required,
        required_rate=round(innings.required_rate, 2) if innings.required_rate is not None else None,
        balls_remaining=innings.balls_remaining,
        is_complete=innings.is_complete,
        end_reason=innings.end_reason,
    )


def _crease_response(active: Optional[ActiveState]) -> Optional[CreaseResponse]:
    if active is None:
        return None
    return CreaseResponse(
        striker_id=active.striker_id,
        non_striker_id=active.non_striker_id,
        bowler_id=active.bowler_id,
        last_bowler_id=active.last_bowler_id,
        awaiting=active.missing_slots(),
    )


def _result_response(result: Optional[MatchResult], summary: Optional[str]) -> Optional[ResultResponse]:
    if result is None:
        return None
    return ResultResponse(
        result_type=result.result_type,
        winner_team_id=result.winner_team_id,
        margin=result.margin,
        margin_unit=result.margin_unit,
        summary=summary or result.summary(),
    )


def _state_response(view: MatchView) -> MatchStateResponse:
    return MatchStateResponse(
        match=MatchResponse.model_validate(view.match),
        innings=_innings_response(view.innings),
        first_innings=_innings_response(view.first_innings),
        crease=_crease_response(view.active),
        this_over=view.this_over,
        partnership_runs=view.partnership.runs,
        partnership_balls=view.partnership.balls,
    )


def _batting_response(stats: BattingStats) -> BattingStatsResponse:
    return BattingStatsResponse(
        player_id=stats.player_id,
        innings_no=stats.innings_no,
        runs=stats.runs,
        balls=stats.balls,
        fours=stats.fours,
        sixes=stats.sixes,
        strike_rate=round(stats.strike_rate, 2),
        is_out=stats.is_out,
        dismissal=stats.dismissal,
    )


def _bowling_response(stats: BowlingStats) -> BowlingStatsResponse:
    return BowlingStatsResponse(
        player_id=stats.player_id,
        innings_no=stats.innings_no,
        overs=stats.overs_display,
        legal_balls=stats.legal_balls,
        runs_conceded=stats.runs_conceded,
        wickets=stats.wickets,
        wides=stats.wides,
        no_balls=stats.no_balls,
        economy=round(stats.economy, 2),
    )


def _scorecard_response(card: Scorecard) -> ScorecardResponse:
    return ScorecardResponse(
        innings_no=card.innings_no,
        runs=card.totals.runs,
        wickets=card.totals.wickets,
        overs=card.totals.overs_display,
        extras={extra_type.value: runs for extra_type, runs in card.totals.extras.items()},
        total_extras=card.totals.total_extras,
        batting=[_batting_response(b) for b in card.batting],
        bowling=[_bowling_response(b) for b in card.bowling],
    )


def _delivery_response(outcome: DeliveryOutcome, summary: Optional[str]) -> DeliveryResultResponse:
    event = outcome.event
    return DeliveryResultResponse(
        event_id=outcome.event_id,
        label=event.label,
        over_no=event.over_no,
        ball_no=event.ball_no,
        batter_runs=event.batter_runs,
        extra_runs=event.extra_runs,
        extra_type=event.extra_type,
        wicket_type=event.wicket_type,
        dismissed_player_id=event.dismissed_player_id,
        replayed=outcome.replayed,
        innings_ended=outcome.innings_ended,
        innings=_innings_response(outcome.innings),
        crease=_crease_response(outcome.active),
        result=_result_response(outcome.result, summary),
    )


@router.post("", response_model=MatchResponse, status_code=201)
def create_match(
    request: MatchCreateRequest,
    scorer_id: int = Depends(require_scorer),
    db: Session = Depends(get_db),
):
    """Schedule a match between two registered teams"""
    engine = MatchEngine(db)
    match = engine.create_match(request.team1_id, request.team2_id, request.overs_limit, request.venue)
    return match


@router.post("/{match_id}/toss", response_model=MatchStateResponse)
def record_toss(
    match_id: int,
    request: TossRequest,
    scorer_id: int = Depends(require_scorer),
    db: Session = Depends(get_db),
):
    """Record the toss; the match goes live with the first innings"""
    engine = MatchEngine(db)
    engine.record_toss(match_id, request.toss_winner_id, request.elected_to.value)
    return _state_response(engine.get_state(match_id))


@router.put("/{match_id}/players", response_model=CreaseResponse)
def assign_players(
    match_id: int,
    request: PlayersRequest,
    scorer_id: int = Depends(require_scorer),
    db: Session = Depends(get_db),
):
    """Select striker, non-striker and/or bowler"""
    engine = MatchEngine(db)
    active = engine.assign_players(
        match_id,
        striker_id=request.striker_id,
        non_striker_id=request.non_striker_id,
        bowler_id=request.bowler_id,
    )
    return _crease_response(active)


@router.post("/{match_id}/deliveries", response_model=DeliveryResultResponse)
def record_delivery(
    match_id: int,
    request: DeliveryRequest,
    scorer_id: int = Depends(require_scorer),
    db: Session = Depends(get_db),
):
    """Score one ball"""
    engine = MatchEngine(db)
    outcome = engine.apply_delivery(
        match_id,
        ball_type=request.ball_type,
        runs=request.runs,
        is_wicket=request.is_wicket,
        wicket_type=request.wicket_type.value if request.wicket_type else None,
        sequence=request.sequence,
    )
    summary = engine.matches.get(match_id).result_summary
    return _delivery_response(outcome, summary)


@router.post("/{match_id}/reset", response_model=MatchResponse)
def reset_match(
    match_id: int,
    scorer_id: int = Depends(require_scorer),
    db: Session = Depends(get_db),
):
    """Delete every recorded ball and return the match to scheduled"""
    engine = MatchEngine(db)
    return engine.reset_match(match_id)


@router.get("/{match_id}/state", response_model=MatchStateResponse)
def get_match_state(match_id: int, db: Session = Depends(get_db)):
    engine = MatchEngine(db)
    return _state_response(engine.get_state(match_id))


@router.get("/{match_id}/events", response_model=list[DeliveryEventResponse])
def get_events(match_id: int, innings_no: Optional[int] = None, db: Session = Depends(get_db)):
    """Ball-by-ball log in scoring order"""
    engine = MatchEngine(db)
    return engine.event_log(match_id, innings_no)


@router.get("/{match_id}/scorecard", response_model=list[ScorecardResponse])
def get_scorecard(match_id: int, db: Session = Depends(get_db)):
    engine = MatchEngine(db)
    return [_scorecard_response(card) for card in engine.scorecards(match_id)]


@router.get("/{match_id}/players/{player_id}/stats", response_model=PlayerStatsResponse)
def get_player_stats(match_id: int, player_id: int, innings_no: int = 1, db: Session = Depends(get_db)):
    engine = MatchEngine(db)
    batting, bowling = engine.player_stats(match_id, player_id, innings_no)
    return PlayerStatsResponse(batting=_batting_response(batting), bowling=_bowling_response(bowling))
