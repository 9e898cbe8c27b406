"""Subscriber for the user_created event."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from identity.application.observability import (
    DefaultUserSubscriberProbe,
    UserSubscriberProbe,
)
from infrastructure.idempotency import (
    DuplicateEventError,
    ProcessedEventLedger,
    idempotency_key,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from shared_kernel.messaging.ports import MessageBroker

USER_CREATED = "user_created"


class UserCreatedPayload(BaseModel):
    """Wire contract of user_created."""

    id: str
    email: str


class UserCreatedSubscriber:
    """Records new registrations.

    The only effect is a log line, gated by the same idempotency ledger as
    the order saga so a redelivered event is reported once.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: UserSubscriberProbe | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._probe = probe or DefaultUserSubscriberProbe()

    def register(self, broker: MessageBroker) -> list[str]:
        """Subscribe to user_created."""
        broker.subscribe(USER_CREATED, self.handle)
        return [USER_CREATED]

    async def handle(self, event_kind: str, payload: dict[str, Any]) -> bool:
        """Handle one delivery.

        Returns:
            True on the first delivery, False if it had no effect
        """
        try:
            event = UserCreatedPayload.model_validate(payload)
        except ValidationError as e:
            self._probe.invalid_payload(str(e))
            return False

        key = idempotency_key(event_kind, event.id)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await ProcessedEventLedger(session).record(key, event_kind)
        except DuplicateEventError:
            self._probe.duplicate_event_skipped(key)
            return False

        self._probe.user_created_received(event.id, event.email)
        return True
