"""RabbitMQ broker adapter built on aio-pika.

Topology: one durable topic exchange for all domain events and one durable
queue for this service, bound once per subscribed event kind. The event
kind is the routing key; the body is the JSON payload.
"""

from __future__ import annotations

import json
from collections import defaultdict
from typing import TYPE_CHECKING, Any

import aio_pika
from aio_pika.abc import (
    AbstractChannel,
    AbstractExchange,
    AbstractIncomingMessage,
    AbstractQueue,
    AbstractRobustConnection,
)
from aio_pika.exceptions import AMQPException

from shared_kernel.messaging.exceptions import (
    BrokerConnectionError,
    BrokerPublishError,
)
from shared_kernel.messaging.observability import BrokerProbe, DefaultBrokerProbe

if TYPE_CHECKING:
    from infrastructure.settings import BrokerSettings
    from shared_kernel.messaging.ports import EventHandler

BACKEND = "rabbitmq"


class RabbitMQBroker:
    """At-least-once broker over RabbitMQ.

    Messages are published persistent. Each delivery is acknowledged only
    after every handler for its kind returned; a handler exception rejects
    the message with requeue so RabbitMQ delivers it again.
    """

    def __init__(
        self,
        settings: BrokerSettings,
        probe: BrokerProbe | None = None,
    ) -> None:
        self._settings = settings
        self._probe = probe or DefaultBrokerProbe()
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._connection: AbstractRobustConnection | None = None
        self._channel: AbstractChannel | None = None
        self._exchange: AbstractExchange | None = None
        self._queue: AbstractQueue | None = None
        self._consumer_tag: str | None = None

    async def connect(self) -> None:
        """Open a robust connection and declare exchange and queue.

        Raises:
            BrokerConnectionError: If RabbitMQ is unreachable
        """
        if self._connection is not None:
            return

        try:
            self._connection = await aio_pika.connect_robust(
                self._settings.url.get_secret_value()
            )
            self._channel = await self._connection.channel()
            await self._channel.set_qos(prefetch_count=self._settings.prefetch_count)
            self._exchange = await self._channel.declare_exchange(
                self._settings.exchange,
                aio_pika.ExchangeType.TOPIC,
                durable=True,
            )
            self._queue = await self._channel.declare_queue(
                self._settings.queue,
                durable=True,
            )
        except (AMQPException, OSError) as e:
            self._probe.connection_failed(BACKEND, str(e))
            await self._reset()
            raise BrokerConnectionError(f"Failed to connect to RabbitMQ: {e}") from e

        self._probe.connected(BACKEND)

    async def close(self) -> None:
        """Cancel the consumer and close the connection."""
        if self._connection is None:
            return

        if self._queue is not None and self._consumer_tag is not None:
            await self._queue.cancel(self._consumer_tag)
        await self._reset()
        self._probe.closed(BACKEND)

    async def _reset(self) -> None:
        if self._connection is not None and not self._connection.is_closed:
            await self._connection.close()
        self._connection = None
        self._channel = None
        self._exchange = None
        self._queue = None
        self._consumer_tag = None

    async def emit(self, event_kind: str, payload: dict[str, Any]) -> None:
        """Publish a persistent JSON message routed by event kind.

        Raises:
            BrokerPublishError: If the message could not be published
        """
        if self._exchange is None:
            raise BrokerPublishError(event_kind, "broker is not connected")

        try:
            body = json.dumps(payload).encode()
        except (TypeError, ValueError) as e:
            raise BrokerPublishError(event_kind, f"payload is not JSON: {e}") from e

        message = aio_pika.Message(
            body=body,
            content_type="application/json",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            type=event_kind,
        )
        try:
            await self._exchange.publish(message, routing_key=event_kind)
        # ChannelInvalidStateError (a RuntimeError) while the robust connection reconnects
        except (AMQPException, OSError, RuntimeError) as e:
            raise BrokerPublishError(event_kind, str(e)) from e

        self._probe.message_published(event_kind)

    def subscribe(self, event_kind: str, handler: EventHandler) -> None:
        """Register a handler; the queue binding is made in start_consuming."""
        self._handlers[event_kind].append(handler)
        self._probe.handler_subscribed(
            event_kind, getattr(handler, "__qualname__", repr(handler))
        )

    async def start_consuming(self) -> None:
        """Bind the queue to every subscribed kind and start the consumer.

        Raises:
            BrokerConnectionError: If the broker is not connected
        """
        if self._queue is None or self._exchange is None:
            raise BrokerConnectionError("RabbitMQ broker is not connected")

        for event_kind in self._handlers:
            await self._queue.bind(self._exchange, routing_key=event_kind)

        self._consumer_tag = await self._queue.consume(self._on_message)
        self._probe.consuming_started(sorted(self._handlers))

    async def _on_message(self, message: AbstractIncomingMessage) -> None:
        event_kind = message.routing_key or ""
        try:
            async with message.process(requeue=True):
                await self._dispatch(event_kind, message.body)
        except Exception as e:
            # process() has already rejected the message with requeue.
            self._probe.handler_failed(event_kind, str(e), redelivery=True)

    async def _dispatch(self, event_kind: str, body: bytes) -> None:
        handlers = self._handlers.get(event_kind)
        if not handlers:
            self._probe.message_without_handler(event_kind)
            return

        try:
            payload = json.loads(body)
        except ValueError as e:
            self._probe.malformed_message_dropped(event_kind, str(e))
            return
        if not isinstance(payload, dict):
            self._probe.malformed_message_dropped(event_kind, "payload is not an object")
            return

        for handler in handlers:
            await handler(event_kind, payload)
        self._probe.message_dispatched(event_kind, len(handlers))
