"""Messaging primitives shared by every bounded context.

Defines the broker port used by the outbox relay (publishing side) and by
event subscribers (consuming side), plus the broker error taxonomy.
"""

from shared_kernel.messaging.exceptions import (
    BrokerConnectionError,
    BrokerError,
    BrokerPublishError,
)
from shared_kernel.messaging.ports import EventHandler, MessageBroker

__all__ = [
    "BrokerConnectionError",
    "BrokerError",
    "BrokerPublishError",
    "EventHandler",
    "MessageBroker",
]
