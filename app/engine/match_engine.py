"""
Live scoring engine - runs the scoring rules against the stores.

Each write takes the match's lock, validates and computes the new state with
the pure rule functions, then persists event, snapshot and crease in a single
transaction. Reads share the match with each other and never overlap a
reset, so they see either the match before it or the match after it.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.engine.aggregator import (
    BattingStats, BowlingStats, Partnership, Scorecard,
    batting_stats, bowling_stats, current_partnership, innings_totals, scorecard, this_over,
)
from app.engine.deliveries import apply_delivery
from app.engine.errors import (
    ScoringError, ValidationError, SamePlayerError, InningsEndedError, MatchStateError, PersistenceError,
)
from app.engine.extras import BallType
from app.engine.innings import new_innings, close_if_ended, setup_second_innings
from app.engine.locks import MatchLockRegistry, match_locks
from app.engine.notifications import DeliveryApplied, DeliveryPublisher, publisher as default_publisher
from app.engine.overs import check_bowler_change
from app.engine.result import MatchResult, calculate_result
from app.engine.state import InningsState, ActiveState, DeliveryEvent
from app.models.match import Match, MatchEvent, MatchStatus, TossDecision, WicketType
from app.stores import EventStore, SnapshotStore, MatchStore, to_active_state, to_delivery_event

logger = logging.getLogger(__name__)


@dataclass
class DeliveryOutcome:
    """What a delivery did"""
    event_id: int
    event: DeliveryEvent
    innings: InningsState
    active: Optional[ActiveState]
    innings_ended: bool = False
    result: Optional[MatchResult] = None
    replayed: bool = False


@dataclass
class MatchView:
    """Read model of a match for spectators and the scorer"""
    match: Match
    innings: Optional[InningsState] = None
    active: Optional[ActiveState] = None
    first_innings: Optional[InningsState] = None
    this_over: list[str] = field(default_factory=list)
    partnership: Partnership = field(default_factory=Partnership)

    @property
    def awaiting(self) -> list[str]:
        if self.active is None:
            return []
        return self.active.missing_slots()


class MatchEngine:
    """
    Scores one match ball by ball.

    Use one instance per session; the lock registry and publisher are
    shared across instances so that concurrent requests see each other.
    """

    def __init__(
        self,
        session: Session,
        publisher: Optional[DeliveryPublisher] = None,
        locks: Optional[MatchLockRegistry] = None,
    ):
        self.session = session
        self.publisher = publisher or default_publisher
        self.locks = locks or match_locks
        self.events = EventStore(session)
        self.snapshots = SnapshotStore(session)
        self.matches = MatchStore(session)

    @contextmanager
    def _transaction(self, action: str):
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Could not %s: %s", action, exc)
            raise PersistenceError(f"Could not {action}, nothing was saved") from exc
        except ScoringError:
            self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def create_match(
        self,
        team1_id: int,
        team2_id: int,
        overs_limit: Optional[int] = None,
        venue: Optional[str] = None,
    ) -> Match:
        """Create a scheduled match between two teams"""
        if team1_id == team2_id:
            raise ValidationError("A team cannot play itself")
        self.matches.get_team(team1_id)
        self.matches.get_team(team2_id)
        overs_limit = overs_limit or settings.DEFAULT_OVERS_LIMIT
        if overs_limit < 1:
            raise ValidationError(f"Overs limit must be at least 1, got {overs_limit}")

        match = Match(
            team1_id=team1_id,
            team2_id=team2_id,
            overs_limit=overs_limit,
            venue=venue,
            status=MatchStatus.SCHEDULED,
        )
        with self._transaction("create match"):
            self.session.add(match)
        logger.info("Match %s created: %s vs %s, %s overs", match.id, team1_id, team2_id, overs_limit)
        return match

    def record_toss(self, match_id: int, toss_winner_id: int, elected_to: str) -> Match:
        """Record the toss and take the match live with innings 1"""
        with self.locks.hold(match_id):
            match = self.matches.get(match_id)
            if match.status != MatchStatus.SCHEDULED:
                raise MatchStateError(f"Toss already recorded for match {match_id}")
            if toss_winner_id not in (match.team1_id, match.team2_id):
                raise ValidationError(f"Team {toss_winner_id} is not playing match {match_id}")
            try:
                decision = TossDecision(elected_to)
            except ValueError:
                raise ValidationError(f"elected_to must be 'bat' or 'bowl', got {elected_to!r}") from None

            if decision == TossDecision.BAT:
                batting_first = toss_winner_id
            else:
                batting_first = match.other_team_id(toss_winner_id)
            innings = new_innings(
                innings_no=1,
                batting_team_id=batting_first,
                bowling_team_id=match.other_team_id(batting_first),
                overs_limit=match.overs_limit,
                roster_size=self.matches.roster_size(batting_first),
            )

            with self._transaction("record toss"):
                match.toss_winner_id = toss_winner_id
                match.toss_decision = decision
                match.status = MatchStatus.LIVE
                self.matches.save_active_state(match_id, innings, ActiveState())
                self.snapshots.upsert(match_id, innings)

        logger.info("Match %s live: team %s won the toss and chose to %s", match_id, toss_winner_id, decision.value)
        return match

    def assign_players(
        self,
        match_id: int,
        striker_id: Optional[int] = None,
        non_striker_id: Optional[int] = None,
        bowler_id: Optional[int] = None,
    ) -> ActiveState:
        """Fill or change the striker, non-striker and bowler slots"""
        with self.locks.hold(match_id):
            match = self._live_match(match_id)
            row = self.matches.get_active_state(match_id)
            active = to_active_state(row)
            dismissed = self.events.dismissed_players(match_id, row.innings_no)

            for batter_id in (striker_id, non_striker_id):
                if batter_id is None:
                    continue
                player = self.matches.get_player(batter_id)
                if player.team_id != row.batting_team_id:
                    raise ValidationError(f"{player.name} is not in the batting side")
                if batter_id in dismissed:
                    raise ValidationError(f"{player.name} is already out this innings")
            if bowler_id is not None:
                player = self.matches.get_player(bowler_id)
                if player.team_id != row.bowling_team_id:
                    raise ValidationError(f"{player.name} is not in the bowling side")
                check_bowler_change(active, bowler_id)

            updated = replace(
                active,
                striker_id=striker_id if striker_id is not None else active.striker_id,
                non_striker_id=non_striker_id if non_striker_id is not None else active.non_striker_id,
                bowler_id=bowler_id if bowler_id is not None else active.bowler_id,
            )
            if updated.striker_id is not None and updated.striker_id == updated.non_striker_id:
                raise SamePlayerError()

            innings = self._load_innings(match, row.innings_no)
            with self._transaction("assign players"):
                self.matches.save_active_state(match_id, innings, updated)

        logger.debug("Match %s crease: %s", match_id, updated)
        return updated

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def apply_delivery(
        self,
        match_id: int,
        ball_type: BallType,
        runs: int,
        is_wicket: bool = False,
        wicket_type: Optional[WicketType] = None,
        sequence: Optional[int] = None,
    ) -> DeliveryOutcome:
        """
        Score one delivery.

        `sequence` is the scorer's own ball counter. Sending a sequence that
        is already recorded returns the stored delivery instead of scoring
        it twice, so a timed-out request can simply be retried.
        """
        with self.locks.hold(match_id):
            match = self.matches.get(match_id)

            if sequence is not None:
                existing = self.events.find_by_sequence(match_id, sequence)
                if existing is not None:
                    logger.info("Match %s: sequence %s already recorded, returning stored delivery", match_id, sequence)
                    return self._replayed(match, existing)

            if match.status == MatchStatus.COMPLETED:
                raise InningsEndedError(f"Match {match_id} is already completed")
            if match.status != MatchStatus.LIVE:
                raise MatchStateError(f"Match {match_id} has not started")

            row = self.matches.get_active_state(match_id)
            innings = self._load_innings(match, row.innings_no)
            try:
                innings, active, event = apply_delivery(
                    innings, to_active_state(row), ball_type, runs, is_wicket, wicket_type,
                )
            except ScoringError as exc:
                logger.info("Match %s: delivery rejected (%s): %s", match_id, exc.code, exc.detail)
                raise

            result = None
            with self._transaction("record delivery"):
                event_id = self.events.append(match_id, event, sequence)
                self.snapshots.upsert(match_id, innings)
                if not innings.is_complete:
                    self.matches.save_active_state(match_id, innings, active)
                elif innings.is_first_innings:
                    second, fresh = setup_second_innings(
                        innings, roster_size=self.matches.roster_size(innings.bowling_team_id),
                    )
                    self.matches.save_active_state(match_id, second, fresh)
                    self.snapshots.upsert(match_id, second)
                else:
                    result = calculate_result(innings)
                    self.matches.complete(match, result)
                    self.matches.delete_active_state(match_id)

        logger.info(
            "Match %s: %s.%s %s -> %s/%s (%s)",
            match_id, event.over_no, event.ball_no, event.label, innings.runs, innings.wickets, innings.overs_display,
        )
        if innings.is_complete:
            logger.info("Match %s: innings %s ended (%s)", match_id, innings.innings_no, innings.end_reason)
        if result is not None:
            logger.info("Match %s completed: %s", match_id, match.result_summary)

        self.publisher.publish(DeliveryApplied(
            match_id=match_id,
            event_id=event_id,
            sequence=sequence,
            event=event,
            runs=innings.runs,
            wickets=innings.wickets,
            legal_balls=innings.legal_balls,
            innings_ended=innings.is_complete,
            match_completed=result is not None,
            result_summary=match.result_summary if result is not None else None,
        ))

        return DeliveryOutcome(
            event_id=event_id,
            event=event,
            innings=innings,
            active=None if innings.is_complete else active,
            innings_ended=innings.is_complete,
            result=result,
        )

    def reset_match(self, match_id: int) -> Match:
        """
        Wipe every delivery, snapshot and the crease; the match goes back to
        scheduled. All or nothing.
        """
        with self.locks.hold(match_id, exclusive=True):
            match = self.matches.get(match_id)
            with self._transaction(f"reset match {match_id}"):
                deleted = self.events.delete_for_match(match_id)
                self.snapshots.delete_for_match(match_id)
                self.matches.delete_active_state(match_id)
                self.matches.revert_to_scheduled(match)

        logger.warning("Match %s reset: %s deliveries deleted", match_id, deleted)
        return match

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_state(self, match_id: int) -> MatchView:
        with self.locks.reading(match_id):
            return self._build_view(match_id)

    def _build_view(self, match_id: int) -> MatchView:
        match = self.matches.get(match_id)
        view = MatchView(match=match)
        if match.status == MatchStatus.SCHEDULED:
            return view

        view.first_innings = self._load_innings(match, 1)
        row = self.matches.get_active_state(match_id)
        if row is not None:
            current_no = row.innings_no
            view.active = to_active_state(row)
        else:
            current_no = 2 if self._load_innings(match, 2) else 1
        view.innings = self._load_innings(match, current_no)

        events = self.events.query(match_id, current_no)
        view.this_over = this_over(events, current_no)
        view.partnership = current_partnership(events, current_no)
        return view

    def event_log(self, match_id: int, innings_no: Optional[int] = None) -> list[MatchEvent]:
        with self.locks.reading(match_id):
            self.matches.get(match_id)
            return self.events.rows(match_id, innings_no)

    def scorecards(self, match_id: int) -> list[Scorecard]:
        with self.locks.reading(match_id):
            self.matches.get(match_id)
            events = self.events.query(match_id)
        innings_numbers = sorted({e.innings_no for e in events})
        return [scorecard(events, innings_no) for innings_no in innings_numbers]

    def player_stats(self, match_id: int, player_id: int, innings_no: int) -> tuple[BattingStats, BowlingStats]:
        with self.locks.reading(match_id):
            self.matches.get(match_id)
            self.matches.get_player(player_id)
            events = self.events.query(match_id, innings_no)
        return batting_stats(events, player_id, innings_no), bowling_stats(events, player_id, innings_no)

    def verify_snapshots(self, match_id: int) -> list[str]:
        """Fold the event log and compare with the stored snapshots. Empty means consistent."""
        with self.locks.reading(match_id):
            self.matches.get(match_id)
            events = self.events.query(match_id)
            snapshots = self.snapshots.list_for_match(match_id)
        problems = []
        for snapshot in snapshots:
            totals = innings_totals(events, snapshot.innings_no)
            stored = (snapshot.runs_scored, snapshot.wickets_lost, snapshot.legal_balls)
            folded = (totals.runs, totals.wickets, totals.legal_balls)
            if stored != folded:
                problems.append(
                    f"Innings {snapshot.innings_no} (team {snapshot.team_id}): "
                    f"snapshot {stored} != events {folded}"
                )
        if problems:
            logger.warning("Match %s snapshot drift: %s", match_id, "; ".join(problems))
        return problems

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _live_match(self, match_id: int) -> Match:
        match = self.matches.get(match_id)
        if match.status == MatchStatus.COMPLETED:
            raise InningsEndedError(f"Match {match_id} is already completed")
        if match.status != MatchStatus.LIVE:
            raise MatchStateError(f"Match {match_id} has not started")
        return match

    def _load_innings(self, match: Match, innings_no: int) -> Optional[InningsState]:
        """Rebuild an innings from its snapshot; None if it has not started."""
        scores = {s.innings_no: s for s in self.snapshots.list_for_match(match.id)}
        snapshot = scores.get(innings_no)
        if snapshot is None:
            return None
        target = None
        if innings_no == 2 and 1 in scores:
            target = scores[1].runs_scored + 1

        innings = new_innings(
            innings_no=innings_no,
            batting_team_id=snapshot.team_id,
            bowling_team_id=match.other_team_id(snapshot.team_id),
            overs_limit=match.overs_limit,
            roster_size=self.matches.roster_size(snapshot.team_id),
            target=target,
        )
        innings.runs = snapshot.runs_scored
        innings.wickets = snapshot.wickets_lost
        innings.legal_balls = snapshot.legal_balls
        return close_if_ended(innings)

    def _replayed(self, match: Match, row: MatchEvent) -> DeliveryOutcome:
        innings = self._load_innings(match, row.innings_no)
        active_row = self.matches.get_active_state(match.id)
        active = None
        if active_row is not None and active_row.innings_no == row.innings_no:
            active = to_active_state(active_row)
        result = None
        if match.status == MatchStatus.COMPLETED and row.innings_no == 2:
            result = calculate_result(innings)
        return DeliveryOutcome(
            event_id=row.id,
            event=to_delivery_event(row),
            innings=innings,
            active=active,
            innings_ended=innings.is_complete,
            result=result,
            replayed=True,
        )
