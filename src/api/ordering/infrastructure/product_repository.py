"""SQLAlchemy implementation of IProductRepository."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.domain.value_objects import ProductId
from ordering.infrastructure.models import ProductModel
from ordering.ports.repositories import IProductRepository


class ProductRepository(IProductRepository):
    """Reads catalogue prices for checkout."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_prices(self, product_ids: list[ProductId]) -> dict[ProductId, Decimal]:
        """Return current unit prices of the products that exist."""
        if not product_ids:
            return {}

        stmt = select(ProductModel.id, ProductModel.price).where(
            ProductModel.id.in_({product_id.value for product_id in product_ids})
        )
        result = await self._session.execute(stmt)

        return {ProductId(value=row.id): Decimal(row.price) for row in result}
