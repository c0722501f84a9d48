import asyncio
import enum
import logging
import random
from dataclasses import dataclass, replace
from typing import Optional

from app.commentary.service import CommentaryService, TIE_LABEL
from app.config import settings
from app.engine.ball_resolver import BallResolver, ResolvedBall, validate_shot
from app.engine.deliveries import DeliveryGenerator
from app.engine.errors import BallInFlightError, MatchResetError, ProgrammingError
from app.engine.innings import BallRecord, Innings, Team, apply_ball, new_innings

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the MCG! It's time for the toss."


class Stage(enum.Enum):
    TOSS = "Toss"
    INNINGS1 = "Innings1"
    INNINGS_BREAK = "InningsBreak"
    INNINGS2 = "Innings2"
    RESULT = "Result"


class TossCall(enum.Enum):
    HEADS = "Heads"
    TAILS = "Tails"


class Decision(enum.Enum):
    BAT = "Bat"
    BOWL = "Bowl"

    @property
    def opposite(self) -> "Decision":
        return Decision.BOWL if self == Decision.BAT else Decision.BAT


@dataclass(frozen=True)
class MatchConfig:
    """Match format, fixed once a match starts"""
    max_overs: int = 2
    max_wickets: int = 2
    balls_per_over: int = 6

    @classmethod
    def from_settings(cls) -> "MatchConfig":
        return cls(
            max_overs=settings.MAX_OVERS,
            max_wickets=settings.MAX_WICKETS,
            balls_per_over=settings.BALLS_PER_OVER,
        )


@dataclass
class GameState:
    stage: Stage = Stage.TOSS
    innings1: Optional[Innings] = None
    innings2: Optional[Innings] = None
    toss_winner: Optional[Team] = None
    user_decision: Optional[Decision] = None

    @property
    def active_innings(self) -> Optional[Innings]:
        if self.stage == Stage.INNINGS1:
            return self.innings1
        if self.stage == Stage.INNINGS2:
            return self.innings2
        return None


@dataclass(frozen=True)
class TossResult:
    call: TossCall
    coin: TossCall
    winner: Team
    computer_decision: Optional[Decision] = None

    @property
    def user_won(self) -> bool:
        return self.winner == Team.USER


@dataclass(frozen=True)
class BallResult:
    ball: ResolvedBall
    record: BallRecord
    innings: Innings


@dataclass(frozen=True)
class MatchResult:
    winner: Optional[Team]
    winner_label: str
    margin: str
    innings1_runs: int
    innings1_wickets: int
    innings2_runs: int
    innings2_wickets: int
    summary: str = ""

    @property
    def is_tie(self) -> bool:
        return self.winner is None


def decide_result(innings1: Innings, innings2: Innings) -> MatchResult:
    """Compare two completed innings; equal totals are a tie"""
    if innings2.total_runs > innings1.total_runs:
        winner = innings2.batting_team
        margin = f"{innings2.max_wickets - innings2.wickets} wickets"
        if innings2.balls_remaining > 0:
            margin += f" ({innings2.balls_remaining} balls remaining)"
    elif innings1.total_runs > innings2.total_runs:
        winner = innings1.batting_team
        margin = f"{innings1.total_runs - innings2.total_runs} runs"
    else:
        winner = None
        margin = "Match tied!"

    return MatchResult(
        winner=winner,
        winner_label=winner.value if winner else TIE_LABEL,
        margin=margin,
        innings1_runs=innings1.total_runs,
        innings1_wickets=innings1.wickets,
        innings2_runs=innings2.total_runs,
        innings2_wickets=innings2.wickets,
    )


class MatchEngine:
    """
    Two-innings hand cricket match between the user and the computer.

    Drives toss -> first innings -> break -> chase -> result. Balls are played
    one at a time with play_ball; the break and result stages follow a
    completed innings after a short delay.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        deliveries: Optional[DeliveryGenerator] = None,
        commentary: Optional[CommentaryService] = None,
        rng: Optional[random.Random] = None,
        transition_delay: Optional[float] = None,
    ):
        self.config = config or MatchConfig.from_settings()
        self.deliveries = deliveries or DeliveryGenerator()
        self.commentary = commentary or CommentaryService()
        self.resolver = BallResolver(self.commentary)
        self.rng = rng or random.Random()
        self.transition_delay = (
            settings.STAGE_TRANSITION_DELAY_SECONDS if transition_delay is None else transition_delay
        )

        self.state = GameState()
        self.is_free_hit = False
        self.commentary_line = WELCOME_MESSAGE
        self.last_ball_summary = ""
        self.result: Optional[MatchResult] = None

        self._ball_in_flight = False
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None

    @property
    def stage(self) -> Stage:
        return self.state.stage

    @property
    def active_innings(self) -> Optional[Innings]:
        return self.state.active_innings

    @property
    def is_processing(self) -> bool:
        return self._ball_in_flight

    @property
    def has_pending_transition(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def target(self) -> Optional[int]:
        innings1 = self.state.innings1
        if innings1 is None or not innings1.is_complete:
            return None
        return innings1.total_runs + 1

    @property
    def is_user_batting(self) -> bool:
        innings = self.active_innings
        return innings is not None and innings.batting_team == Team.USER

    # Toss

    def toss(self, call: TossCall) -> TossResult:
        """Flip the coin against the user's call"""
        if self.state.stage != Stage.TOSS or self.state.toss_winner is not None:
            raise ProgrammingError("The toss has already been made")

        coin = TossCall.HEADS if self.rng.random() < 0.5 else TossCall.TAILS
        winner = Team.USER if coin == call else Team.COMPUTER
        self.state.toss_winner = winner

        if winner == Team.COMPUTER:
            computer_decision = Decision.BAT if self.rng.random() < 0.5 else Decision.BOWL
            logger.info("Computer won the toss and elected to %s", computer_decision.value.lower())
            self._start_match(computer_decision.opposite)
            self.commentary_line = (
                f"Computer wins the toss and chooses to {computer_decision.value}. {self.commentary_line}"
            )
            return TossResult(call=call, coin=coin, winner=winner, computer_decision=computer_decision)

        self.commentary_line = "You won the toss! What will you do?"
        logger.info("User won the toss")
        return TossResult(call=call, coin=coin, winner=winner)

    def choose(self, decision: Decision) -> None:
        """User's bat/bowl choice after winning the toss"""
        if self.state.toss_winner is None:
            raise ProgrammingError("Cannot choose to bat or bowl before the toss")
        if self.state.toss_winner != Team.USER:
            raise ProgrammingError("Only the toss winner chooses to bat or bowl")
        if self.state.stage != Stage.TOSS:
            raise ProgrammingError("The match has already started")
        self._start_match(decision)

    def _start_match(self, user_decision: Decision) -> None:
        batting_first = Team.USER if user_decision == Decision.BAT else Team.COMPUTER
        self.state.user_decision = user_decision
        self.state.innings1 = new_innings(
            batting_first,
            batting_first.opponent,
            self.config.max_overs,
            self.config.max_wickets,
            self.config.balls_per_over,
        )
        self.state.stage = Stage.INNINGS1
        self.is_free_hit = False
        self.commentary_line = f"Match started! {batting_first.value} is batting first."
        logger.info("Match started, %s batting first", batting_first.value)

    # Balls

    async def play_ball(self, shot: int) -> BallResult:
        """Play one delivery against the user's chosen value"""
        if self._ball_in_flight:
            raise BallInFlightError("A ball is already in play")

        innings = self.active_innings
        if innings is None:
            raise ProgrammingError(f"No innings in progress (stage {self.state.stage.value})")
        if innings.is_complete:
            raise ProgrammingError("The innings is already complete")
        validate_shot(shot)

        self._ball_in_flight = True
        generation = self._generation
        stage = self.state.stage
        try:
            delivery = self.deliveries.next_delivery()
            ball = self.resolver.resolve(shot, delivery, self.is_free_hit)
            commentary = await self.resolver.describe(ball)

            if generation != self._generation:
                raise MatchResetError("Match was reset while the ball was in play")

            batting_shot = shot if innings.batting_team == Team.USER else None
            updated = apply_ball(innings, ball, commentary, shot=batting_shot)
            if stage == Stage.INNINGS1:
                self.state.innings1 = updated
            else:
                self.state.innings2 = updated

            self.is_free_hit = ball.free_hit_next
            self.commentary_line = commentary
            self.last_ball_summary = ball.summary
            logger.debug(
                "Ball %s: shot=%s opposing=%s %s",
                updated.history[-1].display, shot, delivery.opposing_value, ball.summary,
            )

            if updated.is_complete:
                logger.info(
                    "%s innings complete: %s (%s)",
                    updated.batting_team.value, updated.score_display, updated.overs_display,
                )
                self._schedule_transition(stage)

            return BallResult(ball=ball, record=updated.history[-1], innings=updated)
        finally:
            if generation == self._generation:
                self._ball_in_flight = False

    # Stage transitions

    def _schedule_transition(self, stage: Stage) -> None:
        if stage == Stage.INNINGS1:
            coro = self._end_first_innings(self._generation)
        else:
            coro = self._finish_match(self._generation)
        self._pending = asyncio.get_running_loop().create_task(coro)

    async def _end_first_innings(self, generation: int) -> None:
        await asyncio.sleep(self.transition_delay)
        if generation != self._generation:
            return
        self.state.stage = Stage.INNINGS_BREAK
        self.commentary_line = f"Innings break! Target is {self.target} runs."
        logger.info("Innings break, target %s", self.target)

    async def _finish_match(self, generation: int) -> None:
        await asyncio.sleep(self.transition_delay)
        if generation != self._generation:
            return

        result = decide_result(self.state.innings1, self.state.innings2)
        summary = await self.commentary.result_summary(
            result.innings1_runs,
            result.innings1_wickets,
            result.innings2_runs,
            result.innings2_wickets,
            result.winner_label,
        )
        if generation != self._generation:
            return

        self.result = replace(result, summary=summary)
        self.state.stage = Stage.RESULT
        self.commentary_line = summary
        logger.info("Match complete: %s (%s)", result.winner_label, result.margin)

    async def settle(self) -> None:
        """Wait for a pending innings-break or result transition"""
        task = self._pending
        if task is not None and not task.done():
            await asyncio.wait([task])

    def start_second_innings(self) -> Innings:
        if self.state.stage != Stage.INNINGS_BREAK:
            raise ProgrammingError("Second innings can only start from the innings break")

        innings1 = self.state.innings1
        innings2 = new_innings(
            innings1.bowling_team,
            innings1.batting_team,
            self.config.max_overs,
            self.config.max_wickets,
            self.config.balls_per_over,
            target=innings1.total_runs + 1,
        )
        self.state.innings2 = innings2
        self.state.stage = Stage.INNINGS2
        self.is_free_hit = False
        self.commentary_line = f"{innings2.batting_team.value} begins the chase!"
        logger.info("Second innings started, %s need %s", innings2.batting_team.value, innings2.target)
        return innings2

    def reset(self) -> None:
        """Back to the toss; drops any pending transition and in-play ball"""
        self._generation += 1
        self._ball_in_flight = False
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

        self.state = GameState()
        self.is_free_hit = False
        self.result = None
        self.commentary_line = WELCOME_MESSAGE
        self.last_ball_summary = ""
        logger.info("Match reset")
