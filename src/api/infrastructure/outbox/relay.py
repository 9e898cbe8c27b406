"""Outbox relay that publishes pending events to the message broker.

The relay runs as a background task within the FastAPI application,
polling the outbox table and handing each pending entry to the broker.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.outbox.repository import OutboxRepository
from shared_kernel.outbox.value_objects import OutboxEntry, RelayCycleResult

if TYPE_CHECKING:
    from shared_kernel.messaging.ports import MessageBroker
    from shared_kernel.outbox.observability import OutboxRelayProbe


class OutboxRelay:
    """Background relay that moves outbox entries to the broker.

    Every cycle fetches the oldest pending entries (at most ``batch_size``)
    and handles each one independently: publish, then mark processed in a
    transaction of its own. A failure on one entry never affects the
    others, and a failed entry is simply picked up again next cycle. There
    is no retry limit.

    Only one relay should run per database; two relays would publish the
    same entries twice, which subscribers tolerate but do not need.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        broker: MessageBroker,
        probe: OutboxRelayProbe,
        poll_interval_seconds: float = 5,
        batch_size: int = 10,
    ) -> None:
        """Initialize the relay.

        Args:
            session_factory: Factory for creating database sessions
            broker: Broker the entries are published to
            probe: Observability probe for logging/metrics
            poll_interval_seconds: Pause between two poll cycles
            batch_size: Maximum entries to publish per cycle
        """
        self._session_factory = session_factory
        self._broker = broker
        self._probe = probe
        self._poll_interval = poll_interval_seconds
        self._batch_size = batch_size
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """Whether the poll loop is active."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the poll loop as a background task."""
        if self.is_running:
            return

        self._running = True
        self._probe.relay_started(self._poll_interval, self._batch_size)
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        """Gracefully stop the relay.

        Signals the loop to stop and waits for it to finish. An entry being
        published when the task is cancelled stays pending.
        """
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._probe.relay_stopped()

    async def _poll_loop(self) -> None:
        """Run poll cycles until stopped, surviving any cycle error."""
        while self._running:
            try:
                await self.run_once()
            except Exception as e:
                self._probe.poll_cycle_failed(str(e))

            await asyncio.sleep(self._poll_interval)

    async def run_once(self) -> RelayCycleResult:
        """Run a single poll cycle.

        Returns:
            How many entries were fetched, published and left pending
        """
        self._probe.poll_cycle_started()

        entries = await self._fetch_pending()
        if not entries:
            self._probe.no_pending_events()
            return RelayCycleResult(fetched=0, published=0, failed=0)

        self._probe.pending_events_found(len(entries))

        published = 0
        for entry in entries:
            if await self._relay_entry(entry):
                published += 1

        failed = len(entries) - published
        self._probe.batch_processed(published, failed)
        return RelayCycleResult(
            fetched=len(entries), published=published, failed=failed
        )

    async def _fetch_pending(self) -> list[OutboxEntry]:
        """Read the oldest pending entries in a short read-only session."""
        async with self._session_factory() as session:
            repository = OutboxRepository(session)
            return await repository.fetch_unprocessed(limit=self._batch_size)

    async def _relay_entry(self, entry: OutboxEntry) -> bool:
        """Publish one entry and mark it processed.

        Returns:
            True if the entry was published and is no longer pending
        """
        try:
            await self._broker.emit(entry.event_type, entry.payload)
        except Exception as e:
            self._probe.publish_failed(entry.id, entry.event_type, str(e))
            return False

        try:
            marked = await self._mark_processed(entry)
        except SQLAlchemyError as e:
            # Already published; the next cycle publishes it again.
            self._probe.mark_processed_failed(entry.id, str(e))
            return False

        if marked:
            self._probe.event_published(entry.id, entry.event_type)
        else:
            self._probe.event_already_processed(entry.id)
        return True

    async def _mark_processed(self, entry: OutboxEntry) -> bool:
        """Set processed_at for one entry in its own transaction."""
        async with self._session_factory() as session:
            async with session.begin():
                repository = OutboxRepository(session)
                return await repository.mark_processed(entry.id)
