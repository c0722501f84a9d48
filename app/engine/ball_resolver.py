"""
Ball resolution: turns a shot and a delivery into runs, wicket and free-hit state.
"""
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from app.engine.deliveries import Delivery, DeliveryOutcomeKind
from app.engine.errors import InvalidShotError

if TYPE_CHECKING:
    from app.commentary.service import CommentaryService


# Legal batting values (no 5s in hand cricket)
LEGAL_SHOTS = (0, 1, 2, 3, 4, 6)

# Automatic runs for an illegal delivery
EXTRA_RUNS = 1


@dataclass(frozen=True)
class ResolvedBall:
    """Result of a single ball"""
    shot: int
    opposing_value: int
    kind: DeliveryOutcomeKind
    runs: int = 0
    is_wicket: bool = False
    counts_toward_over: bool = True
    was_free_hit: bool = False
    free_hit_next: bool = False

    @property
    def is_extra(self) -> bool:
        return self.kind != DeliveryOutcomeKind.NORMAL

    @property
    def summary(self) -> str:
        if self.is_wicket:
            return f"WICKET! ({self.kind.value})"
        return f"{self.runs} runs ({self.kind.value})"


def validate_shot(shot: int) -> int:
    if shot not in LEGAL_SHOTS:
        raise InvalidShotError(f"Shot must be one of {LEGAL_SHOTS}, got {shot!r}")
    return shot


def resolve_ball(shot: int, delivery: Delivery, is_free_hit: bool = False) -> ResolvedBall:
    """
    Resolve one delivery.

    Wides and no-balls give one run, never take a wicket and do not count
    toward the over; a no-ball makes the next delivery a free hit. On a normal
    ball matching values take a wicket unless it is a free hit, which the
    normal ball then uses up.
    """
    validate_shot(shot)

    if delivery.kind == DeliveryOutcomeKind.WIDE:
        return ResolvedBall(
            shot=shot,
            opposing_value=delivery.opposing_value,
            kind=delivery.kind,
            runs=EXTRA_RUNS,
            counts_toward_over=False,
            was_free_hit=is_free_hit,
            free_hit_next=is_free_hit,
        )

    if delivery.kind == DeliveryOutcomeKind.NO_BALL:
        return ResolvedBall(
            shot=shot,
            opposing_value=delivery.opposing_value,
            kind=delivery.kind,
            runs=EXTRA_RUNS,
            counts_toward_over=False,
            was_free_hit=is_free_hit,
            free_hit_next=True,
        )

    is_wicket = shot == delivery.opposing_value and not is_free_hit
    return ResolvedBall(
        shot=shot,
        opposing_value=delivery.opposing_value,
        kind=delivery.kind,
        runs=0 if is_wicket else shot,
        is_wicket=is_wicket,
        was_free_hit=is_free_hit,
        free_hit_next=False,
    )


class BallResolver:
    """Resolves balls and fetches commentary for them."""

    def __init__(self, commentary: "CommentaryService"):
        self.commentary = commentary

    def resolve(self, shot: int, delivery: Delivery, is_free_hit: bool = False) -> ResolvedBall:
        return resolve_ball(shot, delivery, is_free_hit)

    async def describe(self, ball: ResolvedBall) -> str:
        """Commentary line for a resolved ball; never raises"""
        return await self.commentary.ball_commentary(
            shot=ball.shot,
            opposing_value=ball.opposing_value,
            is_wicket=ball.is_wicket,
            kind=ball.kind,
            runs=ball.runs,
            is_free_hit=ball.was_free_hit,
        )
