"""SQLAlchemy implementation of IUserRepository.

Write operations use the transactional outbox pattern - domain events are
collected from the aggregate and appended to the outbox table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import User
from identity.infrastructure.models import UserModel
from identity.infrastructure.serializer import IdentityEventSerializer
from identity.ports.exceptions import DuplicateEmailError, UserCreationConflictError
from identity.ports.repositories import IUserRepository

if TYPE_CHECKING:
    from shared_kernel.outbox.ports import IOutboxRepository


EMAIL_CONSTRAINT_MARKERS = ("ix_users_email", "users.email")


def _is_email_violation(error: IntegrityError) -> bool:
    """Whether the violated constraint is the unique email index.

    PostgreSQL names the index, SQLite names the column.
    """
    detail = str(error.orig)
    return any(marker in detail for marker in EMAIL_CONSTRAINT_MARKERS)


class UserRepository(IUserRepository):
    """Repository managing storage for User aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        outbox: IOutboxRepository,
        serializer: IdentityEventSerializer | None = None,
    ) -> None:
        """Initialize repository with database session and outbox.

        Args:
            session: AsyncSession shared with the calling service
            outbox: Outbox repository for the transactional outbox pattern
            serializer: Optional event serializer for testability
        """
        self._session = session
        self._outbox = outbox
        self._serializer = serializer or IdentityEventSerializer()

    async def save(self, user: User) -> None:
        """Insert the user, then append its events to the outbox.

        Raises:
            DuplicateEmailError: If the email address is already registered
            UserCreationConflictError: If any other constraint rejects the user
        """
        model = UserModel(id=user.id.value, email=user.email)
        self._session.add(model)

        try:
            # Flush to catch the unique email violation before outbox writes
            await self._session.flush()
        except IntegrityError as e:
            if _is_email_violation(e):
                raise DuplicateEmailError(
                    f"Email '{user.email}' is already registered"
                ) from e
            raise UserCreationConflictError(
                f"Failed to create user {user.id}"
            ) from e

        user.created_at = model.created_at

        for event in user.collect_events():
            await self._outbox.append(
                event_type=self._serializer.event_type(event),
                payload=self._serializer.serialize(event),
                occurred_at=event.occurred_at,
                aggregate_type="user",
                aggregate_id=user.id.value,
            )
