"""FastAPI dependencies for the Ordering context."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.repository import OutboxRepository
from ordering.application.observability import (
    DefaultOrderServiceProbe,
    OrderServiceProbe,
)
from ordering.application.services import OrderService
from ordering.infrastructure.order_repository import OrderRepository
from ordering.infrastructure.product_repository import ProductRepository


def get_order_service_probe() -> OrderServiceProbe:
    """Get OrderServiceProbe instance."""
    return DefaultOrderServiceProbe()


def get_order_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> OrderRepository:
    """Get OrderRepository instance writing events through the outbox.

    Args:
        session: Async database session (shared with the outbox repository)
    """
    return OrderRepository(session=session, outbox=OutboxRepository(session=session))


def get_product_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> ProductRepository:
    """Get ProductRepository instance."""
    return ProductRepository(session=session)


def get_order_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    order_repository: Annotated[OrderRepository, Depends(get_order_repository)],
    product_repository: Annotated[ProductRepository, Depends(get_product_repository)],
    probe: Annotated[OrderServiceProbe, Depends(get_order_service_probe)],
) -> OrderService:
    """Get OrderService instance.

    FastAPI caches get_write_session per request, so the service and both
    repositories share one session and one transaction.
    """
    return OrderService(
        session=session,
        order_repository=order_repository,
        product_repository=product_repository,
        probe=probe,
    )
