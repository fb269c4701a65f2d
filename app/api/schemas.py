"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum

from app.engine.extras import BallType
from app.models.match import MatchStatus, TossDecision, ExtraType, WicketType, ResultType


# Enums
class ElectedToEnum(str, Enum):
    BAT = "bat"
    BOWL = "bowl"


class WicketTypeEnum(str, Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"


# Requests
class MatchCreateRequest(BaseModel):
    team1_id: int
    team2_id: int
    overs_limit: Optional[int] = None
    venue: Optional[str] = None


class TossRequest(BaseModel):
    toss_winner_id: int
    elected_to: ElectedToEnum


class PlayersRequest(BaseModel):
    striker_id: Optional[int] = None
    non_striker_id: Optional[int] = None
    bowler_id: Optional[int] = None


class DeliveryRequest(BaseModel):
    ball_type: BallType = BallType.RUN
    runs: int = 0
    is_wicket: bool = False
    wicket_type: Optional[WicketTypeEnum] = None
    sequence: Optional[int] = None  # scorer's ball counter, makes retries safe


# Match Schemas
class MatchResponse(BaseModel):
    id: int
    team1_id: int
    team2_id: int
    overs_limit: int
    venue: Optional[str] = None
    status: MatchStatus
    toss_winner_id: Optional[int] = None
    toss_decision: Optional[TossDecision] = None
    winner_id: Optional[int] = None
    result_type: Optional[ResultType] = None
    win_margin: Optional[int] = None
    win_margin_unit: Optional[str] = None
    result_summary: Optional[str] = None

    class Config:
        from_attributes = True


class InningsResponse(BaseModel):
    innings_no: int
    batting_team_id: int
    bowling_team_id: int
    runs: int
    wickets: int
    legal_balls: int
    overs: str
    run_rate: float
    target: Optional[int] = None
    runs_required: Optional[int] = None
    required_rate: Optional[float] = None
    balls_remaining: int
    is_complete: bool
    end_reason: Optional[str] = None


class CreaseResponse(BaseModel):
    striker_id: Optional[int] = None
    non_striker_id: Optional[int] = None
    bowler_id: Optional[int] = None
    last_bowler_id: Optional[int] = None
    awaiting: list[str] = []


class MatchStateResponse(BaseModel):
    match: MatchResponse
    innings: Optional[InningsResponse] = None
    first_innings: Optional[InningsResponse] = None
    crease: Optional[CreaseResponse] = None
    this_over: list[str] = []
    partnership_runs: int = 0
    partnership_balls: int = 0


# Delivery Schemas
class DeliveryEventResponse(BaseModel):
    id: int
    sequence: Optional[int] = None
    innings_no: int
    over_no: int
    ball_no: int
    batter_id: int
    non_striker_id: int
    bowler_id: int
    runs_batter: int
    runs_extras: int
    extra_type: ExtraType
    wicket_type: WicketType
    player_out_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ResultResponse(BaseModel):
    result_type: ResultType
    winner_team_id: Optional[int] = None
    margin: Optional[int] = None
    margin_unit: Optional[str] = None
    summary: str


class DeliveryResultResponse(BaseModel):
    event_id: int
    label: str
    over_no: int
    ball_no: int
    batter_runs: int
    extra_runs: int
    extra_type: ExtraType
    wicket_type: WicketType
    dismissed_player_id: Optional[int] = None
    replayed: bool = False
    innings_ended: bool = False
    innings: InningsResponse
    crease: Optional[CreaseResponse] = None
    result: Optional[ResultResponse] = None


# Statistics Schemas
class BattingStatsResponse(BaseModel):
    player_id: int
    innings_no: int
    runs: int
    balls: int
    fours: int
    sixes: int
    strike_rate: float
    is_out: bool
    dismissal: Optional[WicketType] = None


class BowlingStatsResponse(BaseModel):
    player_id: int
    innings_no: int
    overs: str
    legal_balls: int
    runs_conceded: int
    wickets: int
    wides: int
    no_balls: int
    economy: float


class ScorecardResponse(BaseModel):
    innings_no: int
    runs: int
    wickets: int
    overs: str
    extras: dict[str, int]
    total_extras: int
    batting: list[BattingStatsResponse]
    bowling: list[BowlingStatsResponse]


class PlayerStatsResponse(BaseModel):
    batting: BattingStatsResponse
    bowling: BowlingStatsResponse
