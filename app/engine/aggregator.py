"""
Score aggregation - batting, bowling and innings figures folded from the
event log. Nothing here keeps running counters; every figure is recomputed
from the ordered events each time.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from app.engine.state import DeliveryEvent
from app.models.match import ExtraType, WicketType


@dataclass
class BattingStats:
    """A batter's innings"""
    player_id: int
    innings_no: int
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal: Optional[WicketType] = None

    @property
    def strike_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs / self.balls) * 100


@dataclass
class BowlingStats:
    """A bowler's figures"""
    player_id: int
    innings_no: int
    legal_balls: int = 0
    runs_conceded: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0

    @property
    def overs_display(self) -> str:
        return f"{self.legal_balls // 6}.{self.legal_balls % 6}"

    @property
    def economy(self) -> float:
        if self.legal_balls == 0:
            return 0.0
        return self.runs_conceded * 6 / self.legal_balls


@dataclass
class InningsTotals:
    innings_no: int
    runs: int = 0
    wickets: int = 0
    legal_balls: int = 0
    batter_runs: int = 0
    extras: dict = field(default_factory=lambda: {t: 0 for t in ExtraType if t != ExtraType.NONE})

    @property
    def total_extras(self) -> int:
        return sum(self.extras.values())

    @property
    def overs_display(self) -> str:
        return f"{self.legal_balls // 6}.{self.legal_balls % 6}"


@dataclass
class Partnership:
    runs: int = 0
    balls: int = 0


@dataclass
class Scorecard:
    innings_no: int
    totals: InningsTotals
    batting: list[BattingStats]
    bowling: list[BowlingStats]


def _innings_events(events: Iterable[DeliveryEvent], innings_no: int) -> list[DeliveryEvent]:
    return [e for e in events if e.innings_no == innings_no]


def _add_batting(stats: BattingStats, event: DeliveryEvent) -> None:
    if event.striker_id == stats.player_id:
        stats.runs += event.batter_runs
        # Only legal deliveries count as balls faced
        if event.is_legal:
            stats.balls += 1
        if event.batter_runs == 4:
            stats.fours += 1
        elif event.batter_runs == 6:
            stats.sixes += 1
    if event.is_wicket and event.dismissed_player_id == stats.player_id:
        stats.is_out = True
        stats.dismissal = event.wicket_type


def _add_bowling(stats: BowlingStats, event: DeliveryEvent) -> None:
    stats.runs_conceded += event.runs_conceded
    if event.is_legal:
        stats.legal_balls += 1
    if event.extra_type == ExtraType.WIDE:
        stats.wides += 1
    elif event.extra_type == ExtraType.NO_BALL:
        stats.no_balls += 1
    if event.is_wicket:
        stats.wickets += 1


def batting_stats(events: Iterable[DeliveryEvent], player_id: int, innings_no: int) -> BattingStats:
    stats = BattingStats(player_id=player_id, innings_no=innings_no)
    for event in _innings_events(events, innings_no):
        _add_batting(stats, event)
    return stats


def bowling_stats(events: Iterable[DeliveryEvent], player_id: int, innings_no: int) -> BowlingStats:
    stats = BowlingStats(player_id=player_id, innings_no=innings_no)
    for event in _innings_events(events, innings_no):
        if event.bowler_id == player_id:
            _add_bowling(stats, event)
    return stats


def innings_totals(events: Iterable[DeliveryEvent], innings_no: int) -> InningsTotals:
    totals = InningsTotals(innings_no=innings_no)
    for event in _innings_events(events, innings_no):
        totals.runs += event.total_runs
        totals.batter_runs += event.batter_runs
        if event.extra_type != ExtraType.NONE:
            totals.extras[event.extra_type] += event.extra_runs
        if event.is_wicket:
            totals.wickets += 1
        if event.is_legal:
            totals.legal_balls += 1
    return totals


def scorecard(events: Iterable[DeliveryEvent], innings_no: int) -> Scorecard:
    """Batting and bowling cards, players in order of first appearance"""
    innings_events = _innings_events(events, innings_no)
    batters: dict[int, BattingStats] = {}
    bowlers: dict[int, BowlingStats] = {}

    for event in innings_events:
        for player_id in (event.striker_id, event.non_striker_id):
            if player_id not in batters:
                batters[player_id] = BattingStats(player_id=player_id, innings_no=innings_no)
        if event.bowler_id not in bowlers:
            bowlers[event.bowler_id] = BowlingStats(player_id=event.bowler_id, innings_no=innings_no)

        for stats in batters.values():
            _add_batting(stats, event)
        _add_bowling(bowlers[event.bowler_id], event)

    return Scorecard(
        innings_no=innings_no,
        totals=innings_totals(innings_events, innings_no),
        batting=list(batters.values()),
        bowling=list(bowlers.values()),
    )


def current_partnership(events: Iterable[DeliveryEvent], innings_no: int) -> Partnership:
    """Runs and legal balls since the last wicket of the innings"""
    partnership = Partnership()
    for event in _innings_events(events, innings_no):
        if event.is_wicket:
            partnership = Partnership()
            continue
        partnership.runs += event.total_runs
        if event.is_legal:
            partnership.balls += 1
    return partnership


def this_over(events: Iterable[DeliveryEvent], innings_no: int) -> list[str]:
    """Ball labels for the over containing the latest delivery"""
    innings_events = _innings_events(events, innings_no)
    if not innings_events:
        return []
    current = innings_events[-1].over_no
    return [e.label for e in innings_events if e.over_no == current]
