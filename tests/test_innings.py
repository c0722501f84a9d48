"""
Tests for innings tracking: accumulation, strike rotation, ball numbering, completion.
"""
import pytest

from app.engine.ball_resolver import resolve_ball
from app.engine.deliveries import Delivery, DeliveryOutcomeKind
from app.engine.errors import ProgrammingError
from app.engine.innings import Team, apply_ball, new_innings

WIDE = DeliveryOutcomeKind.WIDE
NO_BALL = DeliveryOutcomeKind.NO_BALL


def create_innings(max_overs=2, max_wickets=2, target=None):
    return new_innings(Team.USER, Team.COMPUTER, max_overs, max_wickets, 6, target=target)


def play(innings, shot, opposing=5, kind=DeliveryOutcomeKind.NORMAL, free_hit=False):
    ball = resolve_ball(shot, Delivery(opposing, kind), free_hit)
    return apply_ball(innings, ball, "commentary", shot=shot)


def play_shots(innings, shots):
    for shot in shots:
        innings = play(innings, shot)
    return innings


class TestAccumulation:

    def test_new_innings_starts_at_zero(self):
        innings = create_innings()
        assert innings.total_runs == 0
        assert innings.wickets == 0
        assert innings.balls_bowled == 0
        assert innings.history == ()
        assert not innings.is_complete
        assert innings.on_strike_index == 0

    def test_runs_wickets_and_balls(self):
        innings = play_shots(create_innings(), [4, 1, 0])
        innings = play(innings, 2, opposing=2)
        assert innings.total_runs == 5
        assert innings.wickets == 1
        assert innings.balls_bowled == 4

    @pytest.mark.parametrize("kind", [WIDE, NO_BALL])
    def test_extras_do_not_count_toward_over(self, kind):
        innings = play(create_innings(), 4, opposing=4, kind=kind)
        assert innings.total_runs == 1
        assert innings.wickets == 0
        assert innings.balls_bowled == 0
        assert len(innings.history) == 1
        assert innings.extras == 1

    def test_input_innings_is_not_mutated(self):
        before = create_innings()
        after = play(before, 6)
        assert before.total_runs == 0
        assert before.history == ()
        assert after.total_runs == 6

    def test_history_is_chronological(self):
        innings = play_shots(create_innings(), [1, 2, 3])
        innings = play(innings, 4, kind=WIDE)
        assert [b.runs for b in innings.history] == [1, 2, 3, 1]
        assert innings.history[-1].outcome_kind == WIDE

    def test_run_rate(self):
        assert create_innings().run_rate == 0.0
        innings = play_shots(create_innings(), [6, 6, 0])
        assert innings.run_rate == pytest.approx(24.0)
        assert innings.overs_display == "0.3"


class TestStrikeRotation:

    def test_odd_runs_change_strike(self):
        assert play(create_innings(), 1).on_strike_index == 1
        assert play(create_innings(), 3).on_strike_index == 1

    def test_even_runs_keep_strike(self):
        assert play(create_innings(), 2).on_strike_index == 0
        assert play(create_innings(), 4).on_strike_index == 0

    @pytest.mark.parametrize("kind", [WIDE, NO_BALL])
    def test_extras_keep_strike(self, kind):
        assert play(create_innings(), 3, kind=kind).on_strike_index == 0

    def test_end_of_over_changes_strike(self):
        innings = play_shots(create_innings(), [0, 0, 0, 0, 0, 2])
        assert innings.on_strike_index == 1

    def test_single_off_last_ball_keeps_strike(self):
        innings = play_shots(create_innings(), [0, 0, 0, 0, 0, 1])
        assert innings.on_strike_index == 0


class TestBallNumbering:

    def test_last_ball_of_over_shows_as_six(self):
        innings = play_shots(create_innings(), [0] * 6)
        last = innings.history[-1]
        assert (last.over, last.ball_number) == (0, 6)
        assert last.display == "0.6"

    def test_first_ball_of_second_over(self):
        innings = play_shots(create_innings(), [0] * 7)
        assert innings.history[-1].display == "1.1"

    def test_extra_carries_next_ball_number(self):
        innings = play_shots(create_innings(), [0, 0])
        innings = play(innings, 1, kind=WIDE)
        assert innings.history[-1].display == "0.3"
        innings = play(innings, 1)
        assert innings.history[-1].display == "0.3"

    def test_shot_recorded(self):
        innings = play(create_innings(), 4)
        assert innings.history[0].shot == 4


class TestCompletion:

    def test_overs_finished(self):
        innings = play_shots(create_innings(), [1] * 11)
        assert not innings.is_complete
        innings = play(innings, 1)
        assert innings.is_complete
        assert innings.balls_bowled == 12

    def test_all_out_before_overs_finish(self):
        innings = play(create_innings(), 3, opposing=3)
        innings = play(innings, 2)
        innings = play(innings, 6, opposing=6)
        assert innings.is_complete
        assert innings.wickets == 2
        assert innings.balls_remaining == 9

    def test_chase_ends_when_target_passed(self):
        innings = create_innings(target=11)  # first innings made 10
        innings = play_shots(innings, [6, 4])
        assert innings.total_runs == 10
        assert not innings.is_complete
        innings = play(innings, 1)
        assert innings.is_complete
        assert innings.balls_bowled == 3

    def test_chase_can_end_on_an_extra(self):
        innings = play_shots(create_innings(target=7), [6])
        innings = play(innings, 0, kind=NO_BALL)
        assert innings.is_complete
        assert innings.balls_bowled == 1

    def test_first_innings_has_no_target(self):
        innings = play_shots(create_innings(), [6, 6, 6, 6])
        assert not innings.is_complete
        assert innings.runs_required is None

    def test_applying_to_completed_innings_is_an_error(self):
        innings = play_shots(create_innings(max_overs=1), [0] * 6)
        assert innings.is_complete
        with pytest.raises(ProgrammingError):
            play(innings, 1)

    def test_invariants_hold_through_an_innings(self):
        innings = create_innings()
        shots = [4, 1, 0, 6, 2, 3, 1, 4, 6, 0, 2, 1]
        for shot in shots:
            innings = play(innings, shot)
            assert innings.total_runs >= 0
            assert innings.wickets <= innings.max_wickets
            assert innings.balls_bowled <= innings.max_balls
        assert len(innings.history) == len(shots)
