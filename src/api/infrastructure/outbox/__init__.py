"""Infrastructure layer for the outbox pattern.

Contains the SQLAlchemy model, repository implementation, and relay
for outbox persistence and publishing.
"""

from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.relay import OutboxRelay
from infrastructure.outbox.repository import OutboxRepository

__all__ = ["OutboxModel", "OutboxRelay", "OutboxRepository"]
