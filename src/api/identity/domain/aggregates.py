"""User aggregate for the Identity context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from identity.domain.events import DomainEvent, UserCreated
from identity.domain.value_objects import UserId


@dataclass
class User:
    """A registered user.

    Business rules:
    - Email addresses are unique (enforced by the store)
    - Email addresses are compared in lower case
    """

    id: UserId
    email: str
    created_at: datetime | None = None
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def register(cls, email: str) -> User:
        """Factory method for registering a new user.

        Args:
            email: The email address, normalized to lower case

        Returns:
            A new User aggregate with UserCreated event recorded
        """
        user = cls(id=UserId.generate(), email=email.strip().lower())
        user._pending_events.append(
            UserCreated(
                user_id=user.id.value,
                email=user.email,
                occurred_at=datetime.now(UTC),
            )
        )
        return user

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events
