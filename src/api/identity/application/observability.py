"""Domain probes for the Identity application layer."""

from __future__ import annotations

from typing import Protocol

import structlog


class UserServiceProbe(Protocol):
    """Domain probe for user registration."""

    def user_registered(self, user_id: str, email: str) -> None:
        """Record that a user and its user_created event were committed."""
        ...

    def duplicate_email(self, email: str) -> None:
        """Record that a registration was rejected for a taken email."""
        ...


class UserSubscriberProbe(Protocol):
    """Domain probe for the user_created subscriber."""

    def user_created_received(self, user_id: str, email: str) -> None:
        """Record the first delivery of a user_created event."""
        ...

    def duplicate_event_skipped(self, key: str) -> None:
        """Record a redelivery absorbed by the idempotency ledger."""
        ...

    def invalid_payload(self, error: str) -> None:
        """Record that a delivery failed validation and was dropped."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def user_registered(self, user_id: str, email: str) -> None:
        """Record that a user and its user_created event were committed."""
        self._logger.info("user_registered", user_id=user_id, email=email)

    def duplicate_email(self, email: str) -> None:
        """Record that a registration was rejected for a taken email."""
        self._logger.info("user_duplicate_email", email=email)


class DefaultUserSubscriberProbe:
    """Default implementation of UserSubscriberProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = (logger or structlog.get_logger()).bind(
            component="user_subscriber"
        )

    def user_created_received(self, user_id: str, email: str) -> None:
        """Record the first delivery of a user_created event."""
        self._logger.info("user_created_received", user_id=user_id, email=email)

    def duplicate_event_skipped(self, key: str) -> None:
        """Record a redelivery absorbed by the idempotency ledger."""
        self._logger.warning("user_created_duplicate_skipped", idempotency_key=key)

    def invalid_payload(self, error: str) -> None:
        """Record that a delivery failed validation and was dropped."""
        self._logger.error("user_created_invalid_payload", error=error)
