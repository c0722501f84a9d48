"""
Innings tracking. An Innings is an immutable value; apply_ball returns the next one.
"""
import enum
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from app.engine.ball_resolver import ResolvedBall
from app.engine.deliveries import DeliveryOutcomeKind
from app.engine.errors import ProgrammingError


class Team(enum.Enum):
    USER = "Player"
    COMPUTER = "Computer"

    @property
    def opponent(self) -> "Team":
        return Team.COMPUTER if self == Team.USER else Team.USER


@dataclass(frozen=True)
class BallRecord:
    over: int
    ball_number: int  # 1..balls_per_over
    runs: int
    is_wicket: bool
    outcome_kind: DeliveryOutcomeKind
    commentary: str
    shot: Optional[int] = None  # only when the user was batting

    @property
    def display(self) -> str:
        return f"{self.over}.{self.ball_number}"

    @property
    def outcome_string(self) -> str:
        if self.is_wicket:
            return "W"
        if self.outcome_kind == DeliveryOutcomeKind.WIDE:
            return "Wd"
        if self.outcome_kind == DeliveryOutcomeKind.NO_BALL:
            return "Nb"
        return str(self.runs)


@dataclass(frozen=True)
class Innings:
    """Current state of an innings"""
    batting_team: Team
    bowling_team: Team
    max_overs: int
    max_wickets: int
    balls_per_over: int = 6
    total_runs: int = 0
    wickets: int = 0
    balls_bowled: int = 0
    history: Tuple[BallRecord, ...] = field(default_factory=tuple)
    is_complete: bool = False
    on_strike_index: int = 0
    target: Optional[int] = None  # chase only

    @property
    def max_balls(self) -> int:
        return self.max_overs * self.balls_per_over

    @property
    def overs_display(self) -> str:
        return f"{self.balls_bowled // self.balls_per_over}.{self.balls_bowled % self.balls_per_over}"

    @property
    def run_rate(self) -> float:
        if self.balls_bowled == 0:
            return 0.0
        return (self.total_runs / self.balls_bowled) * self.balls_per_over

    @property
    def balls_remaining(self) -> int:
        return max(0, self.max_balls - self.balls_bowled)

    @property
    def runs_required(self) -> Optional[int]:
        if self.target is None:
            return None
        return max(0, self.target - self.total_runs)

    @property
    def required_rate(self) -> Optional[float]:
        if self.target is None:
            return None
        if self.balls_remaining == 0:
            return 0.0
        return (self.runs_required / self.balls_remaining) * self.balls_per_over

    @property
    def extras(self) -> int:
        return sum(b.runs for b in self.history if b.outcome_kind != DeliveryOutcomeKind.NORMAL)

    @property
    def score_display(self) -> str:
        return f"{self.total_runs}/{self.wickets}"


def new_innings(
    batting_team: Team,
    bowling_team: Team,
    max_overs: int,
    max_wickets: int,
    balls_per_over: int = 6,
    target: Optional[int] = None,
) -> Innings:
    """Initialize an innings with all counters at zero"""
    return Innings(
        batting_team=batting_team,
        bowling_team=bowling_team,
        max_overs=max_overs,
        max_wickets=max_wickets,
        balls_per_over=balls_per_over,
        target=target,
    )


def ball_position(balls_bowled: int, counts_toward_over: bool, balls_per_over: int) -> Tuple[int, int]:
    """
    (over, ball_number) for a delivery, given the legal ball count after it.
    The last ball of an over keeps its number (0.6, not 1.0); an extra carries
    the number of the legal ball still to be bowled.
    """
    if counts_toward_over:
        return (balls_bowled - 1) // balls_per_over, (balls_bowled - 1) % balls_per_over + 1
    return balls_bowled // balls_per_over, balls_bowled % balls_per_over + 1


def is_innings_over(innings: Innings) -> bool:
    if innings.balls_bowled >= innings.max_balls:
        return True
    if innings.wickets >= innings.max_wickets:
        return True
    if innings.target is not None and innings.total_runs >= innings.target:
        return True
    return False


def apply_ball(
    innings: Innings,
    ball: ResolvedBall,
    commentary: str,
    shot: Optional[int] = None,
) -> Innings:
    """Apply a resolved ball and return the updated innings"""
    if innings.is_complete:
        raise ProgrammingError("Cannot bowl a ball in a completed innings")

    total_runs = innings.total_runs + ball.runs
    wickets = innings.wickets + (1 if ball.is_wicket else 0)
    balls_bowled = innings.balls_bowled + (1 if ball.counts_toward_over else 0)

    # Rotate strike on odd runs off the bat, then again at the end of the over
    on_strike = innings.on_strike_index
    if ball.runs % 2 == 1 and ball.kind == DeliveryOutcomeKind.NORMAL:
        on_strike = 1 - on_strike
    if ball.counts_toward_over and balls_bowled > 0 and balls_bowled % innings.balls_per_over == 0:
        on_strike = 1 - on_strike

    over, ball_number = ball_position(balls_bowled, ball.counts_toward_over, innings.balls_per_over)
    record = BallRecord(
        over=over,
        ball_number=ball_number,
        runs=ball.runs,
        is_wicket=ball.is_wicket,
        outcome_kind=ball.kind,
        commentary=commentary,
        shot=shot,
    )

    updated = replace(
        innings,
        total_runs=total_runs,
        wickets=wickets,
        balls_bowled=balls_bowled,
        on_strike_index=on_strike,
        history=innings.history + (record,),
    )
    if is_innings_over(updated):
        updated = replace(updated, is_complete=True)
    return updated
