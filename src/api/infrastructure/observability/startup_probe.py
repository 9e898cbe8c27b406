"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_starting(self, app_name: str, broker_backend: str) -> None:
        """Record that the lifespan started wiring components."""
        ...

    def subscribers_registered(self, event_kinds: list[str]) -> None:
        """Record which event kinds this process consumes."""
        ...

    def relay_disabled(self) -> None:
        """Record that the outbox relay is disabled by configuration."""
        ...

    def application_stopped(self) -> None:
        """Record that every component was shut down."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def application_starting(self, app_name: str, broker_backend: str) -> None:
        """Record that the lifespan started wiring components."""
        self._logger.info(
            "application_starting",
            app_name=app_name,
            broker_backend=broker_backend,
        )

    def subscribers_registered(self, event_kinds: list[str]) -> None:
        """Record which event kinds this process consumes."""
        self._logger.info(
            "subscribers_registered",
            event_kinds=sorted(event_kinds),
            count=len(event_kinds),
        )

    def relay_disabled(self) -> None:
        """Record that the outbox relay is disabled by configuration."""
        self._logger.info("outbox_relay_disabled")

    def application_stopped(self) -> None:
        """Record that every component was shut down."""
        self._logger.info("application_stopped")
