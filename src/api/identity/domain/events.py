"""Domain events for the Identity bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserCreated:
    """Event raised when a user registers.

    Attributes:
        user_id: The ULID of the new user
        email: The registered email address
        occurred_at: When the event occurred (UTC)
    """

    user_id: str
    email: str
    occurred_at: datetime


DomainEvent = UserCreated
