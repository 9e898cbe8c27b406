"""Payment gateway port."""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable


@runtime_checkable
class PaymentGateway(Protocol):
    """Captures the payment for an order.

    A declined payment is a business outcome reported as ``False``. Errors
    reaching the gateway itself are raised so the saga step is redelivered.
    """

    async def capture(self, order_id: str, amount: Decimal) -> bool:
        """Capture ``amount`` for the order.

        Returns:
            True if the payment was captured, False if it was declined
        """
        ...
