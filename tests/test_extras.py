"""
Tests for extras classification.

Run with: pytest tests/test_extras.py -v
"""
import pytest

from app.engine.errors import InvalidDeliveryError, ValidationError
from app.engine.extras import BallType, classify
from app.models.match import ExtraType


class TestRunsOffTheBat:
    """A fair delivery scored off the bat"""

    def test_runs_credited_to_batter(self):
        effect = classify(BallType.RUN, 4)
        assert effect.batter_runs == 4
        assert effect.extra_runs == 0
        assert effect.runs_to_total == 4
        assert effect.extra_type == ExtraType.NONE
        assert effect.is_legal_ball

    def test_odd_runs_swap_strike(self):
        assert classify(BallType.RUN, 1).swaps_strike
        assert classify(BallType.RUN, 3).swaps_strike

    def test_even_runs_keep_strike(self):
        assert not classify(BallType.RUN, 0).swaps_strike
        assert not classify(BallType.RUN, 2).swaps_strike
        assert not classify(BallType.RUN, 6).swaps_strike

    def test_wicket_never_swaps(self):
        assert not classify(BallType.RUN, 1, is_wicket=True).swaps_strike


class TestWide:
    """Wides are all extras and never count as a ball"""

    def test_plain_wide_is_one_extra(self):
        effect = classify(BallType.WIDE, 0)
        assert effect.runs_to_total == 1
        assert effect.extra_runs == 1
        assert effect.batter_runs == 0
        assert not effect.is_legal_ball

    def test_wide_with_runs_adds_one(self):
        """A wide with runs=2 adds three to the total"""
        effect = classify(BallType.WIDE, 2)
        assert effect.runs_to_total == 3
        assert effect.extra_runs == 3
        assert effect.batter_runs == 0

    def test_wide_never_swaps(self):
        assert not classify(BallType.WIDE, 1).swaps_strike
        assert not classify(BallType.WIDE, 3).swaps_strike


class TestNoBall:

    def test_penalty_plus_bat_runs(self):
        effect = classify(BallType.NO_BALL, 4)
        assert effect.batter_runs == 4
        assert effect.extra_runs == 1
        assert effect.runs_to_total == 5
        assert effect.extra_type == ExtraType.NO_BALL
        assert not effect.is_legal_ball

    def test_odd_bat_runs_swap(self):
        assert classify(BallType.NO_BALL, 1).swaps_strike
        assert not classify(BallType.NO_BALL, 0).swaps_strike


class TestByes:

    @pytest.mark.parametrize("ball_type,extra_type", [
        (BallType.BYE, ExtraType.BYE),
        (BallType.LEG_BYE, ExtraType.LEG_BYE),
    ])
    def test_runs_are_extras_and_ball_is_legal(self, ball_type, extra_type):
        effect = classify(ball_type, 3)
        assert effect.batter_runs == 0
        assert effect.extra_runs == 3
        assert effect.extra_type == extra_type
        assert effect.is_legal_ball
        assert effect.swaps_strike


class TestInvalidInput:

    def test_negative_runs_rejected(self):
        with pytest.raises(InvalidDeliveryError):
            classify(BallType.RUN, -1)

    def test_more_than_six_rejected(self):
        with pytest.raises(InvalidDeliveryError):
            classify(BallType.RUN, 7)

    def test_unknown_ball_type_rejected(self):
        with pytest.raises(ValidationError):
            classify("BEAMER", 0)

    def test_ball_type_accepted_as_string(self):
        assert classify("LEG_BYE", 1).extra_type == ExtraType.LEG_BYE
