"""Main FastAPI application entry point."""

from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI

from identity.application.subscribers import UserCreatedSubscriber
from identity.presentation import routes as identity_routes
from infrastructure.database.connection import Database
from infrastructure.logging import configure_logging
from infrastructure.messaging import create_broker
from infrastructure.observability import DefaultStartupProbe
from infrastructure.outbox.relay import OutboxRelay
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from ordering.application.saga_handlers import OrderSagaHandlers
from ordering.infrastructure.payment_gateway import SimulatedPaymentGateway
from ordering.presentation import routes as ordering_routes
from shared_kernel.outbox.observability import DefaultOutboxRelayProbe


@asynccontextmanager
async def shopsphere_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages, in start order (stopped in reverse):
    - Database handle (engine and session factory)
    - Message broker connection and subscribers
    - Outbox relay poll loop

    Handles are kept on ``app.state`` for the FastAPI dependencies.
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    probe.application_starting(settings.app_name, settings.broker.backend)

    async with AsyncExitStack() as stack:
        database = Database(settings.database)
        database.connect()
        stack.push_async_callback(database.dispose)
        if settings.database.create_schema:
            await database.create_all()

        broker = create_broker(settings.broker)
        await broker.connect()
        stack.push_async_callback(broker.close)

        saga = OrderSagaHandlers(
            session_factory=database.session_factory,
            payment_gateway=SimulatedPaymentGateway(settings.saga.payment_success_rate),
            release_inventory_on_payment_failure=(
                settings.saga.release_inventory_on_payment_failure
            ),
        )
        users = UserCreatedSubscriber(session_factory=database.session_factory)
        probe.subscribers_registered(saga.register(broker) + users.register(broker))
        await broker.start_consuming()

        relay = OutboxRelay(
            session_factory=database.session_factory,
            broker=broker,
            probe=DefaultOutboxRelayProbe(),
            poll_interval_seconds=settings.outbox.poll_interval_seconds,
            batch_size=settings.outbox.batch_size,
        )
        if settings.outbox.relay_enabled:
            await relay.start()
            stack.push_async_callback(relay.stop)
        else:
            probe.relay_disabled()

        app.state.database = database
        app.state.broker = broker
        app.state.relay = relay

        yield

    probe.application_stopped()


app = FastAPI(
    title="ShopSphere API",
    description="Order pipeline with a transactional outbox and fulfilment saga",
    version=__version__,
    lifespan=shopsphere_lifespan,
)

# Include bounded context routes
app.include_router(ordering_routes.router)
app.include_router(identity_routes.router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
