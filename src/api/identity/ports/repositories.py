"""Repository protocols (ports) for the Identity bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.aggregates import User


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def save(self, user: User) -> None:
        """Persist a new user and append its events to the outbox.

        Raises:
            DuplicateEmailError: If the email address is already registered
        """
        ...
