"""In-process broker for local runs and tests.

Messages go through an asyncio queue as JSON text, so payloads are
copied and checked for serializability exactly as with a real broker.
"""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shared_kernel.messaging.exceptions import (
    BrokerConnectionError,
    BrokerPublishError,
)
from shared_kernel.messaging.observability import BrokerProbe, DefaultBrokerProbe

if TYPE_CHECKING:
    from shared_kernel.messaging.ports import EventHandler

BACKEND = "memory"


@dataclass(frozen=True)
class _Envelope:
    event_kind: str
    body: str
    attempt: int = 0


class InMemoryBroker:
    """Asyncio-queue broker with at-least-once redelivery.

    Two delivery modes:
    - ``drain()`` delivers every queued message in the caller's task and
      lets handler errors propagate. Tests use it to step the pipeline.
    - ``start_consuming()`` runs a background task; a failing delivery is
      put back on the queue until it was redelivered ``max_redeliveries``
      times, then dropped with an error log.
    """

    def __init__(
        self,
        max_redeliveries: int = 3,
        probe: BrokerProbe | None = None,
    ) -> None:
        self._max_redeliveries = max_redeliveries
        self._probe = probe or DefaultBrokerProbe()
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._queue: asyncio.Queue[_Envelope] = asyncio.Queue()
        self._connected = False
        self._consumer: asyncio.Task | None = None
        self.published: list[tuple[str, dict[str, Any]]] = []

    async def connect(self) -> None:
        """Accept emits from now on."""
        self._connected = True
        self._probe.connected(BACKEND)

    async def close(self) -> None:
        """Stop the dispatch task; queued messages stay queued."""
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None
        self._connected = False
        self._probe.closed(BACKEND)

    async def emit(self, event_kind: str, payload: dict[str, Any]) -> None:
        """Queue a message for every handler of its kind.

        Raises:
            BrokerPublishError: If not connected or the payload is not JSON
        """
        if not self._connected:
            raise BrokerPublishError(event_kind, "broker is not connected")
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise BrokerPublishError(event_kind, f"payload is not JSON: {e}") from e

        self._queue.put_nowait(_Envelope(event_kind=event_kind, body=body))
        self.published.append((event_kind, json.loads(body)))
        self._probe.message_published(event_kind)

    def subscribe(self, event_kind: str, handler: EventHandler) -> None:
        """Register a handler for one event kind."""
        self._handlers[event_kind].append(handler)
        self._probe.handler_subscribed(
            event_kind, getattr(handler, "__qualname__", repr(handler))
        )

    async def start_consuming(self) -> None:
        """Start the background dispatch task.

        Raises:
            BrokerConnectionError: If the broker is not connected
        """
        if not self._connected:
            raise BrokerConnectionError("In-memory broker is not connected")
        if self._consumer is not None:
            return

        self._consumer = asyncio.create_task(self._consume_loop())
        self._probe.consuming_started(sorted(self._handlers))

    @property
    def pending(self) -> int:
        """Messages queued and not yet delivered."""
        return self._queue.qsize()

    async def drain(self) -> int:
        """Deliver every queued message, including ones emitted meanwhile.

        Returns:
            Number of messages delivered
        """
        delivered = 0
        while not self._queue.empty():
            envelope = self._queue.get_nowait()
            await self._dispatch(envelope)
            delivered += 1
        return delivered

    async def _consume_loop(self) -> None:
        while True:
            envelope = await self._queue.get()
            try:
                await self._dispatch(envelope)
            except Exception as e:
                redelivery = envelope.attempt < self._max_redeliveries
                self._probe.handler_failed(envelope.event_kind, str(e), redelivery)
                if redelivery:
                    self._queue.put_nowait(
                        _Envelope(
                            event_kind=envelope.event_kind,
                            body=envelope.body,
                            attempt=envelope.attempt + 1,
                        )
                    )

    async def _dispatch(self, envelope: _Envelope) -> None:
        handlers = self._handlers.get(envelope.event_kind)
        if not handlers:
            self._probe.message_without_handler(envelope.event_kind)
            return

        for handler in handlers:
            await handler(envelope.event_kind, json.loads(envelope.body))
        self._probe.message_dispatched(envelope.event_kind, len(handlers))
