"""
Tests for delivery generation.
"""
import random
from unittest.mock import MagicMock

import pytest

from app.engine.deliveries import (
    Delivery, DeliveryGenerator, DeliveryOutcomeKind, classify_roll,
)


class TestClassifyRoll:
    """Legality roll thresholds"""

    @pytest.mark.parametrize("roll, expected", [
        (0.0, DeliveryOutcomeKind.WIDE),
        (0.049, DeliveryOutcomeKind.WIDE),
        (0.05, DeliveryOutcomeKind.NO_BALL),
        (0.099, DeliveryOutcomeKind.NO_BALL),
        (0.10, DeliveryOutcomeKind.NORMAL),
        (0.999, DeliveryOutcomeKind.NORMAL),
    ])
    def test_thresholds(self, roll, expected):
        assert classify_roll(roll) == expected


class TestDeliveryGenerator:

    def test_uses_independent_sources(self):
        """Opposing value and legality come from separate random sources"""
        value_rng = MagicMock(spec=random.Random)
        value_rng.randint.return_value = 3
        kind_rng = MagicMock(spec=random.Random)
        kind_rng.random.return_value = 0.07

        delivery = DeliveryGenerator(value_rng, kind_rng).next_delivery()

        assert delivery == Delivery(opposing_value=3, kind=DeliveryOutcomeKind.NO_BALL)
        value_rng.randint.assert_called_once_with(0, 6)
        value_rng.random.assert_not_called()
        kind_rng.random.assert_called_once()
        kind_rng.randint.assert_not_called()

    def test_opposing_values_cover_zero_to_six(self):
        gen = DeliveryGenerator.seeded(42)
        values = {gen.opposing_value() for _ in range(500)}
        assert values == set(range(7))

    def test_seeded_generators_are_reproducible(self):
        a = DeliveryGenerator.seeded(7)
        b = DeliveryGenerator.seeded(7)
        assert [a.next_delivery() for _ in range(50)] == [b.next_delivery() for _ in range(50)]

    def test_extras_are_roughly_ten_percent(self):
        gen = DeliveryGenerator.seeded(1)
        kinds = [gen.outcome_kind() for _ in range(5000)]
        extras = sum(1 for k in kinds if k != DeliveryOutcomeKind.NORMAL)
        assert 350 <= extras <= 650, f"{extras} extras in 5000 deliveries"

    def test_is_extra(self):
        assert Delivery(2, DeliveryOutcomeKind.WIDE).is_extra
        assert not Delivery(2).is_extra
