"""Message broker adapters.

Implementations of ``shared_kernel.messaging.ports.MessageBroker``:
RabbitMQ through aio-pika for deployments, and an in-process broker for
local runs and tests.
"""

from infrastructure.messaging.factory import create_broker
from infrastructure.messaging.memory import InMemoryBroker
from infrastructure.messaging.rabbitmq import RabbitMQBroker

__all__ = ["InMemoryBroker", "RabbitMQBroker", "create_broker"]
