"""
Tests for innings termination and the match result.
"""
from dataclasses import replace

import pytest

from app.engine.deliveries import apply_delivery
from app.engine.errors import MatchStateError
from app.engine.extras import BallType
from app.engine.innings import (
    InningsEndReason, wicket_cap, new_innings, evaluate, close_if_ended, setup_second_innings,
)
from app.engine.result import calculate_result
from app.engine.state import ActiveState
from app.models.match import ResultType

HOME, AWAY = 100, 200


def chase(runs, wickets, legal_balls=120, target=150):
    innings = new_innings(2, AWAY, HOME, overs_limit=20, roster_size=11, target=target)
    return close_if_ended(replace(innings, runs=runs, wickets=wickets, legal_balls=legal_balls))


class TestWicketCap:

    def test_one_fewer_than_roster(self):
        assert wicket_cap(11) == 10
        assert wicket_cap(8) == 7

    def test_unknown_roster_uses_ten(self):
        assert wicket_cap(None) == 10
        assert wicket_cap(0) == 10
        assert wicket_cap(1) == 10


class TestTermination:

    def test_in_progress(self):
        innings = new_innings(1, HOME, AWAY, overs_limit=20)
        assert evaluate(innings) is None

    def test_all_out(self):
        innings = replace(new_innings(1, HOME, AWAY, overs_limit=20, roster_size=11), wickets=10)
        assert evaluate(innings) == InningsEndReason.ALL_OUT

    def test_overs_complete(self):
        innings = replace(new_innings(1, HOME, AWAY, overs_limit=2), legal_balls=12)
        assert evaluate(innings) == InningsEndReason.OVERS_COMPLETE

    def test_target_only_applies_to_second_innings(self):
        first = replace(new_innings(1, HOME, AWAY, overs_limit=20), runs=500, target=150)
        assert evaluate(first) is None

    def test_target_checked_before_wickets(self):
        innings = chase(runs=150, wickets=10, legal_balls=60)
        assert innings.end_reason == InningsEndReason.TARGET_REACHED.value


class TestSecondInningsSetup:

    def test_sides_swap_and_target_set(self):
        first = replace(new_innings(1, HOME, AWAY, overs_limit=20), runs=149, wickets=6, legal_balls=120)
        second, crease = setup_second_innings(first, roster_size=11)
        assert second.innings_no == 2
        assert second.batting_team_id == AWAY
        assert second.bowling_team_id == HOME
        assert second.target == 150
        assert second.runs == 0
        assert crease == ActiveState()


class TestScenarios:

    def test_two_over_innings_of_singles(self):
        """Scenario A: 12 singles end the innings on overs"""
        innings = new_innings(1, HOME, AWAY, overs_limit=2, roster_size=11)
        crease = ActiveState(striker_id=1, non_striker_id=2, bowler_id=20)
        bowlers = [20, 21]
        for ball in range(12):
            if crease.bowler_id is None:
                crease = replace(crease, bowler_id=bowlers[(ball // 6) % 2])
            innings, crease, _ = apply_delivery(innings, crease, BallType.RUN, 1)

        assert innings.legal_balls == 12
        assert innings.runs == 12
        assert innings.is_complete
        assert innings.end_reason == InningsEndReason.OVERS_COMPLETE.value

    def test_one_short_is_a_tie(self):
        """Scenario B: 149 all out chasing 150"""
        result = calculate_result(chase(runs=149, wickets=10))
        assert result.result_type == ResultType.TIE
        assert result.winner_team_id is None
        assert result.summary() == "Match tied"

    def test_chase_wins_by_wickets(self):
        """Scenario C: 150 for 3 chasing 150"""
        result = calculate_result(chase(runs=150, wickets=3, legal_balls=100))
        assert result.result_type == ResultType.WIN
        assert result.winner_team_id == AWAY
        assert (result.margin, result.margin_unit) == (7, "wickets")

    def test_defence_wins_by_runs(self):
        """Scenario D: 120 all out chasing 150"""
        result = calculate_result(chase(runs=120, wickets=10, legal_balls=90))
        assert result.winner_team_id == HOME
        assert (result.margin, result.margin_unit) == (29, "runs")
        assert result.summary({HOME: "Harbour Hawks"}) == "Harbour Hawks won by 29 runs"

    def test_margin_of_one_is_singular(self):
        result = calculate_result(chase(runs=148, wickets=4))
        assert result.summary({HOME: "Harbour Hawks"}) == "Harbour Hawks won by 1 run"


class TestResultPreconditions:

    def test_first_innings_has_no_result(self):
        innings = close_if_ended(replace(new_innings(1, HOME, AWAY, overs_limit=1), legal_balls=6))
        with pytest.raises(MatchStateError):
            calculate_result(innings)

    def test_chase_in_progress(self):
        with pytest.raises(MatchStateError):
            calculate_result(chase(runs=100, wickets=2, legal_balls=60))
