"""Simulated payment gateway."""

from __future__ import annotations

import random
from decimal import Decimal


class SimulatedPaymentGateway:
    """Approves a configurable share of payments at random.

    Stands in for a real payment provider. A success rate of 1.0 approves
    everything and 0.0 declines everything, which tests use to pick a path.
    """

    def __init__(
        self,
        success_rate: float = 0.9,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be within [0, 1], got {success_rate}")
        self._success_rate = success_rate
        self._rng = rng or random.Random()

    async def capture(self, order_id: str, amount: Decimal) -> bool:
        """Approve the payment with probability ``success_rate``."""
        return self._rng.random() < self._success_rate
