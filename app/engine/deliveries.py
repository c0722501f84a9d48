"""
Delivery generation for the hand cricket engine.
Each delivery is an opposing value plus a legality roll (normal, wide, no-ball).
"""
import enum
import random
from dataclasses import dataclass
from typing import Optional


class DeliveryOutcomeKind(enum.Enum):
    NORMAL = "Normal"
    WIDE = "Wide"
    NO_BALL = "No-ball"


# Opposing values are drawn from 0-6 inclusive
MIN_OPPOSING_VALUE = 0
MAX_OPPOSING_VALUE = 6

# Legality roll thresholds, applied to a single uniform draw in [0, 1)
WIDE_THRESHOLD = 0.05
NO_BALL_THRESHOLD = 0.10


@dataclass(frozen=True)
class Delivery:
    opposing_value: int
    kind: DeliveryOutcomeKind = DeliveryOutcomeKind.NORMAL

    @property
    def is_extra(self) -> bool:
        return self.kind != DeliveryOutcomeKind.NORMAL


def classify_roll(roll: float) -> DeliveryOutcomeKind:
    """Map a uniform draw in [0, 1) to a delivery kind"""
    if roll < WIDE_THRESHOLD:
        return DeliveryOutcomeKind.WIDE
    if roll < NO_BALL_THRESHOLD:
        return DeliveryOutcomeKind.NO_BALL
    return DeliveryOutcomeKind.NORMAL


class DeliveryGenerator:
    """
    Produces deliveries from two independent random sources:
    one for the opposing value, one for the legality roll.
    Pass seeded random.Random instances for reproducible matches.
    """

    def __init__(
        self,
        value_rng: Optional[random.Random] = None,
        kind_rng: Optional[random.Random] = None,
    ):
        self.value_rng = value_rng or random.Random()
        self.kind_rng = kind_rng or random.Random()

    @classmethod
    def seeded(cls, seed: int) -> "DeliveryGenerator":
        # Derive two streams so the draws stay independent
        return cls(random.Random(seed), random.Random(seed + 1))

    def opposing_value(self) -> int:
        return self.value_rng.randint(MIN_OPPOSING_VALUE, MAX_OPPOSING_VALUE)

    def outcome_kind(self) -> DeliveryOutcomeKind:
        return classify_roll(self.kind_rng.random())

    def next_delivery(self) -> Delivery:
        return Delivery(opposing_value=self.opposing_value(), kind=self.outcome_kind())
