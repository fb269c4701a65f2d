"""
Event, snapshot and match stores over a SQLAlchemy session.

The stores never commit; the scoring engine owns the transaction.
"""
from typing import Optional
from sqlalchemy.orm import Session

from app.engine.errors import NotFoundError
from app.engine.result import MatchResult
from app.engine.state import InningsState, ActiveState, DeliveryEvent
from app.models.match import Match, MatchActiveState, MatchScore, MatchEvent, MatchStatus
from app.models.player import Player
from app.models.team import Team


def to_delivery_event(row: MatchEvent) -> DeliveryEvent:
    return DeliveryEvent(
        innings_no=row.innings_no,
        over_no=row.over_no,
        ball_no=row.ball_no,
        striker_id=row.batter_id,
        non_striker_id=row.non_striker_id,
        bowler_id=row.bowler_id,
        batter_runs=row.runs_batter,
        extra_runs=row.runs_extras,
        extra_type=row.extra_type,
        wicket_type=row.wicket_type,
        dismissed_player_id=row.player_out_id,
    )


def to_active_state(row: MatchActiveState) -> ActiveState:
    return ActiveState(
        striker_id=row.striker_id,
        non_striker_id=row.non_striker_id,
        bowler_id=row.bowler_id,
        last_bowler_id=row.last_bowler_id,
    )


class EventStore:
    """Append-only delivery log, ordered by creation"""

    def __init__(self, session: Session):
        self.session = session

    def append(self, match_id: int, event: DeliveryEvent, sequence: Optional[int] = None) -> int:
        row = MatchEvent(
            match_id=match_id,
            sequence=sequence,
            innings_no=event.innings_no,
            over_no=event.over_no,
            ball_no=event.ball_no,
            batter_id=event.striker_id,
            non_striker_id=event.non_striker_id,
            bowler_id=event.bowler_id,
            runs_batter=event.batter_runs,
            runs_extras=event.extra_runs,
            extra_type=event.extra_type,
            wicket_type=event.wicket_type,
            player_out_id=event.dismissed_player_id,
        )
        self.session.add(row)
        self.session.flush()
        return row.id

    def rows(self, match_id: int, innings_no: Optional[int] = None) -> list[MatchEvent]:
        query = self.session.query(MatchEvent).filter_by(match_id=match_id)
        if innings_no is not None:
            query = query.filter_by(innings_no=innings_no)
        return query.order_by(MatchEvent.id).all()

    def query(self, match_id: int, innings_no: Optional[int] = None) -> list[DeliveryEvent]:
        return [to_delivery_event(row) for row in self.rows(match_id, innings_no)]

    def find_by_sequence(self, match_id: int, sequence: int) -> Optional[MatchEvent]:
        return self.session.query(MatchEvent).filter_by(match_id=match_id, sequence=sequence).first()

    def dismissed_players(self, match_id: int, innings_no: int) -> set[int]:
        rows = (
            self.session.query(MatchEvent.player_out_id)
            .filter_by(match_id=match_id, innings_no=innings_no)
            .filter(MatchEvent.player_out_id.isnot(None))
            .all()
        )
        return {player_id for (player_id,) in rows}

    def delete_for_match(self, match_id: int) -> int:
        return self.session.query(MatchEvent).filter_by(match_id=match_id).delete()


class SnapshotStore:
    """Score cache keyed by (match, team)"""

    def __init__(self, session: Session):
        self.session = session

    def read(self, match_id: int, team_id: int) -> Optional[MatchScore]:
        return self.session.query(MatchScore).filter_by(match_id=match_id, team_id=team_id).first()

    def upsert(self, match_id: int, innings: InningsState) -> MatchScore:
        snapshot = self.read(match_id, innings.batting_team_id)
        if snapshot is None:
            snapshot = MatchScore(match_id=match_id, team_id=innings.batting_team_id)
            self.session.add(snapshot)
        snapshot.innings_no = innings.innings_no
        snapshot.runs_scored = innings.runs
        snapshot.wickets_lost = innings.wickets
        snapshot.legal_balls = innings.legal_balls
        snapshot.is_first_innings = innings.is_first_innings
        self.session.flush()
        return snapshot

    def list_for_match(self, match_id: int) -> list[MatchScore]:
        return (
            self.session.query(MatchScore)
            .filter_by(match_id=match_id)
            .order_by(MatchScore.innings_no)
            .all()
        )

    def delete_for_match(self, match_id: int) -> int:
        return self.session.query(MatchScore).filter_by(match_id=match_id).delete()


class MatchStore:
    """Matches, rosters and the live crease"""

    def __init__(self, session: Session):
        self.session = session

    def get(self, match_id: int) -> Match:
        match = self.session.get(Match, match_id, populate_existing=True)
        if match is None:
            raise NotFoundError(f"Match {match_id} not found")
        return match

    def get_team(self, team_id: int) -> Team:
        team = self.session.get(Team, team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    def get_player(self, player_id: int) -> Player:
        player = self.session.get(Player, player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id} not found")
        return player

    def roster_size(self, team_id: int) -> int:
        return self.session.query(Player).filter_by(team_id=team_id).count()

    def team_names(self, match: Match) -> dict[int, str]:
        return {match.team1_id: match.team1.name, match.team2_id: match.team2.name}

    def get_active_state(self, match_id: int) -> Optional[MatchActiveState]:
        return self.session.get(MatchActiveState, match_id, populate_existing=True)

    def save_active_state(self, match_id: int, innings: InningsState, active: ActiveState) -> MatchActiveState:
        row = self.get_active_state(match_id)
        if row is None:
            row = MatchActiveState(match_id=match_id)
            self.session.add(row)
        row.innings_no = innings.innings_no
        row.batting_team_id = innings.batting_team_id
        row.bowling_team_id = innings.bowling_team_id
        row.target = innings.target
        row.striker_id = active.striker_id
        row.non_striker_id = active.non_striker_id
        row.bowler_id = active.bowler_id
        row.last_bowler_id = active.last_bowler_id
        self.session.flush()
        return row

    def delete_active_state(self, match_id: int) -> int:
        return self.session.query(MatchActiveState).filter_by(match_id=match_id).delete()

    def complete(self, match: Match, result: MatchResult) -> None:
        match.status = MatchStatus.COMPLETED
        match.winner_id = result.winner_team_id
        match.result_type = result.result_type
        match.win_margin = result.margin
        match.win_margin_unit = result.margin_unit
        match.result_summary = result.summary(self.team_names(match))

    def revert_to_scheduled(self, match: Match) -> None:
        match.status = MatchStatus.SCHEDULED
        match.toss_winner_id = None
        match.toss_decision = None
        match.winner_id = None
        match.result_type = None
        match.win_margin = None
        match.win_margin_unit = None
        match.result_summary = None
