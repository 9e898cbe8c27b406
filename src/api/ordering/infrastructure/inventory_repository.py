"""SQLAlchemy implementation of IInventoryRepository.

Reservation relies on the store's atomic conditional update rather than
a read followed by a write: ``quantity`` is decremented only where it is
still large enough, and the affected row count tells whether it was.
"""

from __future__ import annotations

from collections import Counter

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.domain.value_objects import LineItem, ProductId
from ordering.infrastructure.models import InventoryModel
from ordering.infrastructure.observability import (
    DefaultInventoryRepositoryProbe,
    InventoryRepositoryProbe,
)
from ordering.ports.repositories import IInventoryRepository


def _quantities_by_product(items: tuple[LineItem, ...]) -> list[tuple[str, int]]:
    """Merge lines of the same product, ordered by product id.

    Row locks are always taken in the same order, so two reservations over
    the same products cannot deadlock.
    """
    totals: Counter[str] = Counter()
    for item in items:
        totals[item.product_id.value] += item.quantity
    return sorted(totals.items())


class InventoryRepository(IInventoryRepository):
    """Stock levels shared by checkout and the saga.

    Must run inside the caller's transaction: a failed reservation restores
    the lines it already decremented before returning.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: InventoryRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultInventoryRepositoryProbe()

    async def reserve(self, items: tuple[LineItem, ...]) -> bool:
        """Decrement stock for all lines, or for none.

        Returns:
            True if every line was reserved, False if any line lacked stock
        """
        reserved: list[tuple[str, int]] = []

        for product_id, quantity in _quantities_by_product(items):
            stmt = (
                update(InventoryModel)
                .where(InventoryModel.product_id == product_id)
                .where(InventoryModel.quantity >= quantity)
                .values(quantity=InventoryModel.quantity - quantity)
                .execution_options(synchronize_session=False)
            )
            result = await self._session.execute(stmt)

            if result.rowcount != 1:
                await self._add(reserved)
                self._probe.stock_insufficient(product_id, quantity)
                return False

            reserved.append((product_id, quantity))

        self._probe.stock_reserved(len(reserved))
        return True

    async def release(self, items: tuple[LineItem, ...]) -> None:
        """Give reserved quantities back to stock."""
        lines = _quantities_by_product(items)
        await self._add(lines)
        self._probe.stock_released(len(lines))

    async def get_quantity(self, product_id: ProductId) -> int | None:
        """Return the stock level of a product."""
        stmt = select(InventoryModel.quantity).where(
            InventoryModel.product_id == product_id.value
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _add(self, lines: list[tuple[str, int]]) -> None:
        for product_id, quantity in lines:
            stmt = (
                update(InventoryModel)
                .where(InventoryModel.product_id == product_id)
                .values(quantity=InventoryModel.quantity + quantity)
                .execution_options(synchronize_session=False)
            )
            await self._session.execute(stmt)
