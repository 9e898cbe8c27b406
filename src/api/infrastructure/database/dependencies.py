"""Database dependency injection for FastAPI.

The Database handle is created by the application lifespan and stored
on ``app.state``; these dependencies read it from there so no module
level engine state exists.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.connection import Database


def get_database(request: Request) -> Database:
    """Return the process-wide Database handle (FastAPI dependency)."""
    return request.app.state.database


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Return the session factory of the process-wide Database handle."""
    return get_database(request).session_factory


async def get_write_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for mutations (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`.

    Usage:
        @router.post("/orders")
        async def create_order(
            session: AsyncSession = Depends(get_write_session)
        ):
            async with session.begin():
                # mutations here
                session.add(order)
                # transaction commits at end of `with` block

    Yields:
        AsyncSession for database operations
    """
    async with get_session_factory(request)() as session:
        yield session
