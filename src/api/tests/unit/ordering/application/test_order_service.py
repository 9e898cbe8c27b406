"""Unit tests for OrderService."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from ordering.application.services import OrderService
from ordering.application.value_objects import CheckoutLine
from ordering.domain.aggregates import Order
from ordering.domain.value_objects import OrderId, ProductId
from ordering.ports.exceptions import OrderCreationConflictError, ProductNotFoundError

KEYBOARD = ProductId(value="01ARZCX0P0HZGQP3MZXQQ0PR01")
MOUSE = ProductId(value="01ARZCX0P0HZGQP3MZXQQ0PR02")


@pytest.fixture
def mock_order_repository():
    repository = MagicMock()
    repository.save = AsyncMock()
    repository.get_by_id = AsyncMock(return_value=None)
    return repository


@pytest.fixture
def mock_product_repository():
    repository = MagicMock()
    repository.get_prices = AsyncMock(
        return_value={KEYBOARD: Decimal("49.99"), MOUSE: Decimal("19.50")}
    )
    return repository


@pytest.fixture
def mock_probe():
    return MagicMock()


@pytest.fixture
def order_service(
    mock_session, mock_order_repository, mock_product_repository, mock_probe
):
    return OrderService(
        session=mock_session,
        order_repository=mock_order_repository,
        product_repository=mock_product_repository,
        probe=mock_probe,
    )


class TestCreateOrder:
    """Tests for OrderService.create_order()."""

    @pytest.mark.asyncio
    async def test_snapshots_catalogue_prices(
        self, order_service, mock_order_repository, mock_probe
    ):
        """Line items should carry the price read at checkout."""
        # Act
        order = await order_service.create_order(
            user_id="user-1",
            lines=[
                CheckoutLine(product_id=KEYBOARD, quantity=2),
                CheckoutLine(product_id=MOUSE, quantity=1),
            ],
        )

        # Assert
        assert [item.price for item in order.items] == [
            Decimal("49.99"),
            Decimal("19.50"),
        ]
        assert order.total == Decimal("119.48")
        mock_order_repository.save.assert_awaited_once_with(order)
        mock_probe.order_created.assert_called_once()

    @pytest.mark.asyncio
    async def test_runs_inside_one_transaction(self, order_service, mock_session):
        await order_service.create_order(
            user_id="user-1", lines=[CheckoutLine(product_id=KEYBOARD, quantity=1)]
        )

        mock_session.begin.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_product_writes_nothing(
        self,
        order_service,
        mock_product_repository,
        mock_order_repository,
        mock_probe,
    ):
        mock_product_repository.get_prices.return_value = {KEYBOARD: Decimal("1.00")}
        unknown = ProductId(value="01ARZCX0P0HZGQP3MZXQQ0PR99")

        with pytest.raises(ProductNotFoundError) as exc_info:
            await order_service.create_order(
                user_id="user-1",
                lines=[
                    CheckoutLine(product_id=KEYBOARD, quantity=1),
                    CheckoutLine(product_id=unknown, quantity=1),
                ],
            )

        assert exc_info.value.product_ids == [unknown.value]
        mock_order_repository.save.assert_not_awaited()
        mock_probe.products_not_found.assert_called_once_with([unknown.value])

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_conflict(
        self, order_service, mock_order_repository, mock_probe
    ):
        mock_order_repository.save.side_effect = IntegrityError(
            "INSERT", {}, Exception("constraint failed")
        )

        with pytest.raises(OrderCreationConflictError):
            await order_service.create_order(
                user_id="user-1", lines=[CheckoutLine(product_id=KEYBOARD, quantity=1)]
            )

        mock_probe.order_creation_conflict.assert_called_once()
        mock_probe.order_created.assert_not_called()


class TestGetOrder:
    """Tests for OrderService.get_order()."""

    @pytest.mark.asyncio
    async def test_returns_order(self, order_service, mock_order_repository):
        order = MagicMock(spec=Order)
        mock_order_repository.get_by_id.return_value = order

        result = await order_service.get_order(OrderId.generate())

        assert result is order

    @pytest.mark.asyncio
    async def test_missing_order_is_reported(self, order_service, mock_probe):
        order_id = OrderId.generate()

        result = await order_service.get_order(order_id)

        assert result is None
        mock_probe.order_not_found.assert_called_once_with(order_id.value)
