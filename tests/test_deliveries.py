"""
Tests for applying a single delivery to the innings and the crease.
"""
from dataclasses import replace

import pytest

from app.engine.deliveries import apply_delivery
from app.engine.errors import (
    StateError, MissingPlayersError, SamePlayerError, InvalidDeliveryError, InningsEndedError,
)
from app.engine.extras import BallType
from app.engine.innings import new_innings
from app.engine.state import ActiveState
from app.models.match import ExtraType, WicketType

STRIKER, NON_STRIKER, BOWLER = 1, 2, 20


def make_innings(**overrides):
    innings = new_innings(innings_no=1, batting_team_id=100, bowling_team_id=200, overs_limit=20, roster_size=11)
    return replace(innings, **overrides)


def make_crease():
    return ActiveState(striker_id=STRIKER, non_striker_id=NON_STRIKER, bowler_id=BOWLER)


class TestStrikeRotation:
    """Parity of runs decides who faces next"""

    @pytest.mark.parametrize("runs", [1, 3, 5])
    def test_odd_runs_swap_ends(self, runs):
        _, crease, _ = apply_delivery(make_innings(), make_crease(), BallType.RUN, runs)
        assert crease.striker_id == NON_STRIKER
        assert crease.non_striker_id == STRIKER

    @pytest.mark.parametrize("runs", [0, 2, 4, 6])
    def test_even_runs_keep_ends(self, runs):
        _, crease, _ = apply_delivery(make_innings(), make_crease(), BallType.RUN, runs)
        assert crease.striker_id == STRIKER
        assert crease.non_striker_id == NON_STRIKER

    def test_single_leg_bye_swaps(self):
        _, crease, _ = apply_delivery(make_innings(), make_crease(), BallType.LEG_BYE, 1)
        assert crease.striker_id == NON_STRIKER


class TestWideDelivery:

    def test_wide_with_two_runs(self):
        """WIDE runs=2: total +3, no legal ball, no swap"""
        innings, crease, event = apply_delivery(make_innings(), make_crease(), BallType.WIDE, 2)
        assert innings.runs == 3
        assert innings.legal_balls == 0
        assert crease.striker_id == STRIKER
        assert event.extra_type == ExtraType.WIDE
        assert event.extra_runs == 3
        assert event.label == "3Wd"

    def test_wide_keeps_ball_number(self):
        innings = make_innings(legal_balls=3)
        _, _, event = apply_delivery(innings, make_crease(), BallType.WIDE, 0)
        assert (event.over_no, event.ball_no) == (0, 4)

    def test_wide_on_over_boundary_does_not_end_over(self):
        innings = make_innings(legal_balls=5)
        updated, crease, _ = apply_delivery(innings, make_crease(), BallType.WIDE, 0)
        assert updated.legal_balls == 5
        assert crease.bowler_id == BOWLER


class TestWicket:

    def test_wicket_off_dot_ball(self):
        """RUN wicket with runs=0: wickets +1, legal +1, striker cleared"""
        innings, crease, event = apply_delivery(make_innings(), make_crease(), BallType.RUN, 0, is_wicket=True)
        assert innings.wickets == 1
        assert innings.legal_balls == 1
        assert crease.striker_id is None
        assert crease.non_striker_id == NON_STRIKER
        assert event.dismissed_player_id == STRIKER
        assert event.label == "W"

    def test_next_delivery_needs_a_striker(self):
        innings, crease, _ = apply_delivery(make_innings(), make_crease(), BallType.RUN, 0, is_wicket=True)
        with pytest.raises(StateError) as exc_info:
            apply_delivery(innings, crease, BallType.RUN, 0)
        assert exc_info.value.slots == ["striker"]

    def test_wicket_type_defaults_to_caught(self):
        _, _, event = apply_delivery(make_innings(), make_crease(), BallType.RUN, 0, is_wicket=True)
        assert event.wicket_type == WicketType.CAUGHT

    def test_wicket_type_from_string(self):
        _, _, event = apply_delivery(make_innings(), make_crease(), BallType.RUN, 0, True, "lbw")
        assert event.wicket_type == WicketType.LBW

    def test_stumped_off_a_wide(self):
        innings, crease, event = apply_delivery(
            make_innings(), make_crease(), BallType.WIDE, 0, True, WicketType.STUMPED,
        )
        assert innings.runs == 1
        assert innings.wickets == 1
        assert innings.legal_balls == 0
        assert crease.striker_id is None
        assert event.wicket_type == WicketType.STUMPED

    def test_runs_completed_before_run_out_count(self):
        innings, crease, _ = apply_delivery(make_innings(), make_crease(), BallType.RUN, 1, True, "run_out")
        assert innings.runs == 1
        assert crease.striker_id is None
        assert crease.non_striker_id == NON_STRIKER

    def test_wicket_on_last_ball_moves_vacancy(self):
        innings = make_innings(legal_balls=5)
        _, crease, _ = apply_delivery(innings, make_crease(), BallType.RUN, 0, is_wicket=True)
        assert crease.striker_id == NON_STRIKER
        assert crease.non_striker_id is None
        assert crease.bowler_id is None

    def test_wicket_type_without_wicket_rejected(self):
        with pytest.raises(InvalidDeliveryError):
            apply_delivery(make_innings(), make_crease(), BallType.RUN, 0, False, WicketType.BOWLED)

    def test_unknown_wicket_type_rejected(self):
        with pytest.raises(InvalidDeliveryError):
            apply_delivery(make_innings(), make_crease(), BallType.RUN, 0, True, "timed_out_twice")


class TestOverCompletion:

    def test_sixth_ball_ends_over(self):
        innings = make_innings(legal_balls=5)
        updated, crease, event = apply_delivery(innings, make_crease(), BallType.RUN, 0)
        assert updated.legal_balls == 6
        assert (event.over_no, event.ball_no) == (0, 6)
        assert crease.striker_id == NON_STRIKER
        assert crease.bowler_id is None
        assert crease.last_bowler_id == BOWLER

    def test_single_off_last_ball_swaps_twice(self):
        """Parity swap then over-end swap: the striker keeps strike"""
        innings = make_innings(legal_balls=5)
        _, crease, _ = apply_delivery(innings, make_crease(), BallType.RUN, 1)
        assert crease.striker_id == STRIKER
        assert crease.non_striker_id == NON_STRIKER

    def test_next_ball_needs_a_bowler(self):
        innings, crease, _ = apply_delivery(make_innings(legal_balls=5), make_crease(), BallType.RUN, 0)
        with pytest.raises(MissingPlayersError) as exc_info:
            apply_delivery(innings, crease, BallType.RUN, 0)
        assert exc_info.value.slots == ["bowler"]


class TestRejection:
    """A rejected delivery leaves everything as it was"""

    def test_invalid_runs_no_mutation(self):
        innings, crease = make_innings(runs=10), make_crease()
        with pytest.raises(InvalidDeliveryError):
            apply_delivery(innings, crease, BallType.RUN, 9)
        assert innings.runs == 10
        assert crease == make_crease()

    def test_same_player_at_both_ends(self):
        crease = ActiveState(striker_id=STRIKER, non_striker_id=STRIKER, bowler_id=BOWLER)
        with pytest.raises(SamePlayerError):
            apply_delivery(make_innings(), crease, BallType.RUN, 0)

    def test_completed_innings_rejected(self):
        innings = make_innings(is_complete=True, end_reason="overs_complete")
        with pytest.raises(InningsEndedError):
            apply_delivery(innings, make_crease(), BallType.RUN, 0)

    def test_empty_crease_lists_every_slot(self):
        with pytest.raises(MissingPlayersError) as exc_info:
            apply_delivery(make_innings(), ActiveState(), BallType.RUN, 0)
        assert exc_info.value.slots == ["striker", "non_striker", "bowler"]

    def test_inputs_untouched_on_success(self):
        innings, crease = make_innings(), make_crease()
        apply_delivery(innings, crease, BallType.RUN, 1)
        assert innings.runs == 0
        assert crease.striker_id == STRIKER
