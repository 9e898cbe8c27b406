"""User application service."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import DefaultUserServiceProbe, UserServiceProbe
from identity.domain.aggregates import User
from identity.ports.exceptions import DuplicateEmailError
from identity.ports.repositories import IUserRepository


class UserService:
    """Application service for user registration."""

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: UserServiceProbe | None = None,
    ):
        self._session = session
        self._users = user_repository
        self._probe = probe or DefaultUserServiceProbe()

    async def register(self, email: str) -> User:
        """Register a user and its user_created event atomically.

        Args:
            email: Email address of the new user

        Returns:
            The registered User aggregate

        Raises:
            DuplicateEmailError: If the email address is already registered
            UserCreationConflictError: If any other constraint rejects the user
        """
        try:
            async with self._session.begin():
                user = User.register(email)
                await self._users.save(user)
        except DuplicateEmailError:
            self._probe.duplicate_email(email)
            raise

        self._probe.user_registered(user.id.value, user.email)
        return user
