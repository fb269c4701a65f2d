from typing import Optional
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from app.database import Base


class MatchStatus(enum.Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETED = "completed"


class TossDecision(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class ExtraType(enum.Enum):
    NONE = "none"
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"


class WicketType(enum.Enum):
    NONE = "none"
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"


class ResultType(enum.Enum):
    WIN = "win"
    TIE = "tie"


class Match(Base):
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Teams
    team1_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team2_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team1: Mapped["Team"] = relationship("Team", foreign_keys=[team1_id])
    team2: Mapped["Team"] = relationship("Team", foreign_keys=[team2_id])

    # Format
    overs_limit: Mapped[int] = mapped_column(Integer, default=20)
    venue: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Toss
    toss_winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    toss_decision: Mapped[Optional[TossDecision]] = mapped_column(Enum(TossDecision), nullable=True)

    # Status
    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.SCHEDULED)

    # Result
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    result_type: Mapped[Optional[ResultType]] = mapped_column(Enum(ResultType), nullable=True)
    win_margin: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    win_margin_unit: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)  # "runs" or "wickets"
    result_summary: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    @property
    def max_balls(self) -> int:
        return self.overs_limit * 6

    def other_team_id(self, team_id: int) -> int:
        return self.team2_id if team_id == self.team1_id else self.team1_id

    def __repr__(self):
        return f"<Match {self.id}: {self.team1_id} vs {self.team2_id} ({self.status.value})>"


class MatchActiveState(Base):
    """Who is on strike and bowling. Only exists while the match is live."""
    __tablename__ = "match_active_state"

    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id", ondelete="CASCADE"), primary_key=True)
    innings_no: Mapped[int] = mapped_column(Integer, default=1)
    batting_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    bowling_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))

    striker_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    non_striker_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    bowler_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    last_bowler_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    # Target (for 2nd innings)
    target: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ActiveState match={self.match_id} innings={self.innings_no}>"


class MatchScore(Base):
    """Per team, per innings score cache. Always equal to a fold over the innings' events."""
    __tablename__ = "match_scores"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id", ondelete="CASCADE"), index=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    innings_no: Mapped[int] = mapped_column(Integer)

    runs_scored: Mapped[int] = mapped_column(Integer, default=0)
    wickets_lost: Mapped[int] = mapped_column(Integer, default=0)
    legal_balls: Mapped[int] = mapped_column(Integer, default=0)
    is_first_innings: Mapped[bool] = mapped_column(default=True)

    __table_args__ = (
        UniqueConstraint("match_id", "team_id", name="unique_match_team_score"),
    )

    @property
    def overs_display(self) -> str:
        return f"{self.legal_balls // 6}.{self.legal_balls % 6}"

    def __repr__(self):
        return f"<MatchScore match={self.match_id} team={self.team_id}: {self.runs_scored}/{self.wickets_lost} ({self.overs_display})>"


class MatchEvent(Base):
    """One recorded delivery. Rows are never updated; id order is the scoring order."""
    __tablename__ = "match_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id", ondelete="CASCADE"), index=True)
    sequence: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # client idempotency key
    innings_no: Mapped[int] = mapped_column(Integer)

    over_no: Mapped[int] = mapped_column(Integer)
    ball_no: Mapped[int] = mapped_column(Integer)  # 1-6, extras repeat the upcoming ball

    # Players involved
    batter_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    non_striker_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    bowler_id: Mapped[int] = mapped_column(ForeignKey("players.id"))

    # Outcome
    runs_batter: Mapped[int] = mapped_column(Integer, default=0)
    runs_extras: Mapped[int] = mapped_column(Integer, default=0)
    extra_type: Mapped[ExtraType] = mapped_column(Enum(ExtraType), default=ExtraType.NONE)

    # Wicket
    wicket_type: Mapped[WicketType] = mapped_column(Enum(WicketType), default=WicketType.NONE)
    player_out_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("match_id", "sequence", name="unique_match_sequence"),
    )

    def __repr__(self):
        return f"<MatchEvent {self.over_no}.{self.ball_no}: {self.runs_batter}+{self.runs_extras}>"
