"""
Match result - decided once the second innings is over.
"""
from dataclasses import dataclass
from typing import Optional

from app.engine.errors import MatchStateError
from app.engine.state import InningsState
from app.models.match import ResultType


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a completed match"""
    result_type: ResultType
    winner_team_id: Optional[int] = None
    margin: Optional[int] = None
    margin_unit: Optional[str] = None  # "runs" or "wickets"

    @property
    def is_tie(self) -> bool:
        return self.result_type == ResultType.TIE

    def summary(self, team_names: Optional[dict] = None) -> str:
        if self.is_tie:
            return "Match tied"
        names = team_names or {}
        winner = names.get(self.winner_team_id, f"Team {self.winner_team_id}")
        unit = self.margin_unit if self.margin != 1 else self.margin_unit.rstrip("s")
        return f"{winner} won by {self.margin} {unit}"


def calculate_result(innings: InningsState) -> MatchResult:
    """
    Result of a finished chase.

    Chasing side reached the target -> wins by the wickets it had left.
    One short of the target -> tie.
    Otherwise -> defending side wins by the runs it had to spare.
    """
    if innings.innings_no != 2 or innings.target is None:
        raise MatchStateError("A result can only be calculated for the second innings")
    if not innings.is_complete:
        raise MatchStateError("The second innings is still in progress")

    target = innings.target
    if innings.runs >= target:
        return MatchResult(
            result_type=ResultType.WIN,
            winner_team_id=innings.batting_team_id,
            margin=innings.wicket_cap - innings.wickets,
            margin_unit="wickets",
        )
    if innings.runs == target - 1:
        return MatchResult(result_type=ResultType.TIE)
    return MatchResult(
        result_type=ResultType.WIN,
        winner_team_id=innings.bowling_team_id,
        margin=target - innings.runs - 1,
        margin_unit="runs",
    )
