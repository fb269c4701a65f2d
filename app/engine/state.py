"""
Value types the scoring engine passes around.
"""
from dataclasses import dataclass
from typing import Optional

from app.models.match import ExtraType, WicketType


@dataclass
class InningsState:
    """Cumulative state of one innings"""
    innings_no: int
    batting_team_id: int
    bowling_team_id: int
    overs_limit: int = 20
    runs: int = 0
    wickets: int = 0
    legal_balls: int = 0
    target: Optional[int] = None
    wicket_cap: int = 10
    is_complete: bool = False
    end_reason: Optional[str] = None

    @property
    def is_first_innings(self) -> bool:
        return self.innings_no == 1

    @property
    def max_balls(self) -> int:
        return self.overs_limit * 6

    @property
    def balls_remaining(self) -> int:
        return max(0, self.max_balls - self.legal_balls)

    @property
    def overs_display(self) -> str:
        return f"{self.legal_balls // 6}.{self.legal_balls % 6}"

    @property
    def run_rate(self) -> float:
        if self.legal_balls == 0:
            return 0.0
        return (self.runs / self.legal_balls) * 6

    @property
    def runs_required(self) -> Optional[int]:
        if self.target is None:
            return None
        return max(0, self.target - self.runs)

    @property
    def required_rate(self) -> Optional[float]:
        if self.target is None:
            return None
        if self.balls_remaining == 0:
            return None
        return (self.runs_required / self.balls_remaining) * 6

    def __repr__(self):
        return f"<Innings {self.innings_no}: {self.runs}/{self.wickets} ({self.overs_display})>"


@dataclass
class ActiveState:
    """Who is facing, who is at the other end and who is bowling"""
    striker_id: Optional[int] = None
    non_striker_id: Optional[int] = None
    bowler_id: Optional[int] = None
    last_bowler_id: Optional[int] = None

    def missing_slots(self) -> list[str]:
        slots = []
        if self.striker_id is None:
            slots.append("striker")
        if self.non_striker_id is None:
            slots.append("non_striker")
        if self.bowler_id is None:
            slots.append("bowler")
        return slots

    @property
    def is_ready(self) -> bool:
        return not self.missing_slots()

    @property
    def awaiting_bowler(self) -> bool:
        """True between overs, until a different bowler is picked"""
        return self.bowler_id is None and self.last_bowler_id is not None


@dataclass(frozen=True)
class DeliveryEvent:
    """One recorded delivery. Never modified once created."""
    innings_no: int
    over_no: int
    ball_no: int
    striker_id: int
    non_striker_id: int
    bowler_id: int
    batter_runs: int = 0
    extra_runs: int = 0
    extra_type: ExtraType = ExtraType.NONE
    wicket_type: WicketType = WicketType.NONE
    dismissed_player_id: Optional[int] = None

    @property
    def total_runs(self) -> int:
        return self.batter_runs + self.extra_runs

    @property
    def is_legal(self) -> bool:
        return self.extra_type not in (ExtraType.WIDE, ExtraType.NO_BALL)

    @property
    def is_wicket(self) -> bool:
        return self.wicket_type != WicketType.NONE

    @property
    def runs_conceded(self) -> int:
        """Runs charged to the bowler: byes and leg byes are not"""
        if self.extra_type in (ExtraType.BYE, ExtraType.LEG_BYE):
            return self.batter_runs
        return self.total_runs

    @property
    def label(self) -> str:
        if self.is_wicket:
            return "W"
        if self.extra_type == ExtraType.WIDE:
            return f"{self.extra_runs}Wd"
        if self.extra_type == ExtraType.NO_BALL:
            return f"{self.total_runs}Nb"
        if self.extra_type == ExtraType.BYE:
            return f"{self.extra_runs}B"
        if self.extra_type == ExtraType.LEG_BYE:
            return f"{self.extra_runs}Lb"
        return str(self.batter_runs)

    def __repr__(self):
        return f"<Delivery {self.over_no}.{self.ball_no}: {self.label}>"
