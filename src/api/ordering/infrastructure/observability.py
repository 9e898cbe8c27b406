"""Domain probes for Ordering repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events of order persistence and stock changes.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class OrderRepositoryProbe(Protocol):
    """Domain probe for order repository operations."""

    def order_saved(self, order_id: str, saga_state: str, event_count: int) -> None:
        """Record that an order and its pending events were written."""
        ...

    def order_retrieved(self, order_id: str) -> None:
        """Record that an order was retrieved."""
        ...

    def order_conflict(self, order_id: str, error: str) -> None:
        """Record that the store rejected an order."""
        ...


class InventoryRepositoryProbe(Protocol):
    """Domain probe for stock changes."""

    def stock_reserved(self, line_count: int) -> None:
        """Record that every line of an order was reserved."""
        ...

    def stock_insufficient(self, product_id: str, requested: int) -> None:
        """Record that a line could not be reserved and the others were restored."""
        ...

    def stock_released(self, line_count: int) -> None:
        """Record that reserved quantities were given back."""
        ...


class DefaultOrderRepositoryProbe:
    """Default implementation of OrderRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def order_saved(self, order_id: str, saga_state: str, event_count: int) -> None:
        """Record that an order and its pending events were written."""
        self._logger.debug(
            "order_saved",
            order_id=order_id,
            saga_state=saga_state,
            event_count=event_count,
        )

    def order_retrieved(self, order_id: str) -> None:
        """Record that an order was retrieved."""
        self._logger.debug("order_retrieved", order_id=order_id)

    def order_conflict(self, order_id: str, error: str) -> None:
        """Record that the store rejected an order."""
        self._logger.warning("order_conflict", order_id=order_id, error=error)


class DefaultInventoryRepositoryProbe:
    """Default implementation of InventoryRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def stock_reserved(self, line_count: int) -> None:
        """Record that every line of an order was reserved."""
        self._logger.debug("stock_reserved", line_count=line_count)

    def stock_insufficient(self, product_id: str, requested: int) -> None:
        """Record that a line could not be reserved and the others were restored."""
        self._logger.info(
            "stock_insufficient",
            product_id=product_id,
            requested=requested,
        )

    def stock_released(self, line_count: int) -> None:
        """Record that reserved quantities were given back."""
        self._logger.info("stock_released", line_count=line_count)
