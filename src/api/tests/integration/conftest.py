"""Integration test fixtures for store-backed tests.

Each test gets a fresh SQLite file through aiosqlite with the full
schema created from the ORM metadata. No external services are needed;
the broker is the in-process InMemoryBroker.
"""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.connection import Database
from infrastructure.messaging import InMemoryBroker
from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.relay import OutboxRelay
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.settings import DatabaseSettings
from ordering.application.services import OrderService
from ordering.domain.value_objects import ProductId
from ordering.infrastructure.inventory_repository import InventoryRepository
from ordering.infrastructure.models import InventoryModel, ProductModel
from ordering.infrastructure.order_repository import OrderRepository
from ordering.infrastructure.product_repository import ProductRepository
from shared_kernel.outbox.observability import DefaultOutboxRelayProbe


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires a SQL store)",
    )


@pytest.fixture
def integration_db_settings(tmp_path) -> DatabaseSettings:
    """Database settings pointing at a per-test SQLite file."""
    return DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'shopsphere.db'}")


@pytest_asyncio.fixture
async def database(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[Database, None]:
    """Provide a connected database with every table created."""
    database = Database(integration_db_settings)
    database.connect()
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def session_factory(database: Database) -> async_sessionmaker[AsyncSession]:
    return database.session_factory


@pytest_asyncio.fixture
async def broker() -> AsyncGenerator[InMemoryBroker, None]:
    """Provide a connected in-memory broker; tests deliver with drain()."""
    broker = InMemoryBroker()
    await broker.connect()
    yield broker
    await broker.close()


@pytest.fixture
def relay(session_factory, broker) -> OutboxRelay:
    return OutboxRelay(
        session_factory=session_factory,
        broker=broker,
        probe=DefaultOutboxRelayProbe(),
        poll_interval_seconds=0.01,
        batch_size=10,
    )


@pytest.fixture
def seed_product(session_factory):
    """Insert a product with its stock level."""

    async def _seed(price: str, stock: int, name: str = "Product") -> ProductId:
        product_id = ProductId.generate()
        async with session_factory() as session:
            async with session.begin():
                session.add(
                    ProductModel(id=product_id.value, name=name, price=Decimal(price))
                )
                await session.flush()
                session.add(InventoryModel(product_id=product_id.value, quantity=stock))
        return product_id

    return _seed


@pytest.fixture
def place_order(session_factory):
    """Run checkout through OrderService in a session of its own."""

    async def _place(user_id: str, lines):
        async with session_factory() as session:
            service = OrderService(
                session=session,
                order_repository=OrderRepository(
                    session=session, outbox=OutboxRepository(session)
                ),
                product_repository=ProductRepository(session=session),
            )
            return await service.create_order(user_id=user_id, lines=lines)

    return _place


@pytest.fixture
def stock_of(session_factory):
    async def _stock(product_id: ProductId) -> int | None:
        async with session_factory() as session:
            return await InventoryRepository(session).get_quantity(product_id)

    return _stock


@pytest.fixture
def outbox_rows(session_factory):
    """Read outbox rows, optionally only pending ones, oldest first."""

    async def _rows(pending_only: bool = False) -> list[OutboxModel]:
        stmt = select(OutboxModel).order_by(OutboxModel.created_at, OutboxModel.id)
        if pending_only:
            stmt = stmt.where(OutboxModel.processed_at.is_(None))
        async with session_factory() as session:
            return list((await session.execute(stmt)).scalars().all())

    return _rows


@pytest.fixture
def count_rows(session_factory):
    async def _count(model) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return _count


@pytest.fixture
def load_order(session_factory):
    async def _load(order_id):
        async with session_factory() as session:
            repository = OrderRepository(
                session=session, outbox=OutboxRepository(session)
            )
            return await repository.get_by_id(order_id)

    return _load


@pytest.fixture
def run_pipeline(relay, broker):
    """Alternate relay cycles and broker deliveries until both are idle."""

    async def _run(max_cycles: int = 20) -> None:
        for _ in range(max_cycles):
            result = await relay.run_once()
            delivered = await broker.drain()
            if result.fetched == 0 and delivered == 0:
                return
        raise AssertionError(f"Pipeline still busy after {max_cycles} cycles")

    return _run
