"""Broker selection from settings."""

from __future__ import annotations

from infrastructure.messaging.memory import InMemoryBroker
from infrastructure.messaging.rabbitmq import RabbitMQBroker
from infrastructure.settings import BrokerSettings
from shared_kernel.messaging.ports import MessageBroker


def create_broker(settings: BrokerSettings) -> MessageBroker:
    """Create the broker named by ``settings.backend`` (not yet connected)."""
    if settings.backend == "memory":
        return InMemoryBroker(max_redeliveries=settings.max_redeliveries)
    return RabbitMQBroker(settings)
