"""Observability probes for the outbox relay.

Following Domain Oriented Observability, probes capture domain-significant
events and metrics without cluttering relay logic with logging concerns.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

import structlog

logger = structlog.get_logger()


class OutboxRelayProbe(Protocol):
    """Protocol for outbox relay observability.

    Implementations can log, emit metrics, or send traces.
    """

    def relay_started(self, poll_interval: float, batch_size: int) -> None:
        """Called when the relay poll loop starts."""
        ...

    def relay_stopped(self) -> None:
        """Called when the relay stops."""
        ...

    def poll_cycle_started(self) -> None:
        """Called at the start of every poll cycle."""
        ...

    def no_pending_events(self) -> None:
        """Called when a poll cycle finds nothing to relay."""
        ...

    def pending_events_found(self, count: int) -> None:
        """Called when a poll cycle fetched pending entries."""
        ...

    def event_published(self, entry_id: UUID, event_type: str) -> None:
        """Called when an entry was published and marked processed."""
        ...

    def event_already_processed(self, entry_id: UUID) -> None:
        """Called when marking found the entry already processed."""
        ...

    def publish_failed(self, entry_id: UUID, event_type: str, error: str) -> None:
        """Called when publishing fails; the entry stays pending."""
        ...

    def mark_processed_failed(self, entry_id: UUID, error: str) -> None:
        """Called when a published entry could not be marked processed."""
        ...

    def batch_processed(self, published: int, failed: int) -> None:
        """Called when a batch of entries has been handled."""
        ...

    def poll_cycle_failed(self, error: str) -> None:
        """Called when a whole poll cycle fails (e.g. store unreachable)."""
        ...


class DefaultOutboxRelayProbe:
    """Default implementation using structlog.

    Logs all relay events with appropriate log levels.
    """

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="outbox_relay")

    def relay_started(self, poll_interval: float, batch_size: int) -> None:
        """Log relay start."""
        self._log.info(
            "outbox_relay_started",
            poll_interval_seconds=poll_interval,
            batch_size=batch_size,
        )

    def relay_stopped(self) -> None:
        """Log relay stop."""
        self._log.info("outbox_relay_stopped")

    def poll_cycle_started(self) -> None:
        """Log poll cycle start."""
        self._log.debug("outbox_poll_cycle_started")

    def no_pending_events(self) -> None:
        """Log an empty poll cycle."""
        self._log.debug("outbox_no_pending_events")

    def pending_events_found(self, count: int) -> None:
        """Log the number of entries about to be published."""
        self._log.info("outbox_pending_events_found", count=count)

    def event_published(self, entry_id: UUID, event_type: str) -> None:
        """Log successful publish."""
        self._log.info(
            "outbox_event_published",
            entry_id=str(entry_id),
            event_type=event_type,
        )

    def event_already_processed(self, entry_id: UUID) -> None:
        """Log an entry that another cycle already marked."""
        self._log.warning("outbox_event_already_processed", entry_id=str(entry_id))

    def publish_failed(self, entry_id: UUID, event_type: str, error: str) -> None:
        """Log failed publish that will be retried next cycle."""
        self._log.error(
            "outbox_publish_failed",
            entry_id=str(entry_id),
            event_type=event_type,
            error=error,
        )

    def mark_processed_failed(self, entry_id: UUID, error: str) -> None:
        """Log failed mark; the entry will be published again."""
        self._log.error(
            "outbox_mark_processed_failed",
            entry_id=str(entry_id),
            error=error,
        )

    def batch_processed(self, published: int, failed: int) -> None:
        """Log batch processing."""
        self._log.info("outbox_batch_processed", published=published, failed=failed)

    def poll_cycle_failed(self, error: str) -> None:
        """Log poll cycle error."""
        self._log.warning("outbox_poll_cycle_failed", error=error)
