"""
Tests for over and ball arithmetic.
"""
import pytest

from app.engine.errors import BowlerRepeatError
from app.engine.overs import (
    over_and_ball, overs_display, event_position, is_over_complete, complete_over, check_bowler_change,
)
from app.engine.state import ActiveState


class TestBallArithmetic:

    @pytest.mark.parametrize("legal,expected", [(0, (0, 0)), (5, (0, 5)), (6, (1, 0)), (14, (2, 2))])
    def test_over_and_ball(self, legal, expected):
        assert over_and_ball(legal) == expected

    def test_overs_display(self):
        assert overs_display(0) == "0.0"
        assert overs_display(9) == "1.3"
        assert overs_display(120) == "20.0"

    def test_sixth_ball_numbered_six(self):
        """The last ball of an over keeps its over number"""
        assert event_position(5) == (0, 6)

    def test_next_over_starts_at_one(self):
        assert event_position(6) == (1, 1)

    def test_full_over_recorded_one_to_six(self):
        """Recorded balls run 1-6 while the counter rolls to the next over"""
        assert [event_position(before) for before in range(6)] == [(0, ball) for ball in range(1, 7)]
        assert over_and_ball(6) == (1, 0)
        assert overs_display(6) == "1.0"

    def test_over_complete_only_on_multiples_of_six(self):
        assert not is_over_complete(0)
        assert not is_over_complete(5)
        assert is_over_complete(6)
        assert is_over_complete(12)


class TestOverEnd:

    def test_batters_change_ends_and_bowler_cleared(self):
        active = ActiveState(striker_id=1, non_striker_id=2, bowler_id=20)
        after = complete_over(active)
        assert after.striker_id == 2
        assert after.non_striker_id == 1
        assert after.bowler_id is None
        assert after.last_bowler_id == 20
        assert after.awaiting_bowler

    def test_input_not_modified(self):
        active = ActiveState(striker_id=1, non_striker_id=2, bowler_id=20)
        complete_over(active)
        assert active.bowler_id == 20


class TestBowlerChange:

    def test_same_bowler_rejected(self):
        active = ActiveState(last_bowler_id=20)
        with pytest.raises(BowlerRepeatError):
            check_bowler_change(active, 20)

    def test_different_bowler_allowed(self):
        check_bowler_change(ActiveState(last_bowler_id=20), 21)

    def test_first_over_has_no_restriction(self):
        check_bowler_change(ActiveState(), 20)
