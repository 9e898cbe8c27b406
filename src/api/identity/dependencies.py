"""FastAPI dependencies for the Identity context."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.user_service import UserService
from identity.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from infrastructure.outbox.repository import OutboxRepository


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserService:
    """Get UserService instance writing events through the outbox."""
    repository = UserRepository(session=session, outbox=OutboxRepository(session))
    return UserService(session=session, user_repository=repository)
