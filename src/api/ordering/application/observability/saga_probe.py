"""Domain probe for the order fulfilment saga.

Every handler invocation ends in exactly one of: step completed,
duplicate skipped, transition rejected, order not found, or invalid
payload dropped. Infrastructure errors are not recorded here; they
propagate to the broker, which logs them and redelivers.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class SagaProbe(Protocol):
    """Domain probe for saga handler invocations."""

    def event_received(self, event_kind: str, order_id: str) -> None:
        """Record that a valid saga event reached its handler."""
        ...

    def invalid_payload(self, event_kind: str, error: str) -> None:
        """Record that a delivery failed validation and was dropped."""
        ...

    def duplicate_event_skipped(self, event_kind: str, order_id: str, key: str) -> None:
        """Record that the idempotency ledger already held this step."""
        ...

    def transition_rejected(self, order_id: str, state: str, event_kind: str) -> None:
        """Record that the order's saga state does not accept the event."""
        ...

    def order_not_found(self, event_kind: str, order_id: str) -> None:
        """Record that an event referenced an unknown order."""
        ...

    def inventory_released(self, order_id: str) -> None:
        """Record that compensation gave reserved stock back."""
        ...

    def step_completed(
        self,
        order_id: str,
        action: str,
        succeeded: bool,
        next_state: str,
        follow_up: str | None,
    ) -> None:
        """Record that a saga step committed."""
        ...


class DefaultSagaProbe:
    """Default implementation of SagaProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = (logger or structlog.get_logger()).bind(component="order_saga")

    def event_received(self, event_kind: str, order_id: str) -> None:
        """Record that a valid saga event reached its handler."""
        self._logger.debug(
            "saga_event_received", event_kind=event_kind, order_id=order_id
        )

    def invalid_payload(self, event_kind: str, error: str) -> None:
        """Record that a delivery failed validation and was dropped."""
        self._logger.error("saga_invalid_payload", event_kind=event_kind, error=error)

    def duplicate_event_skipped(self, event_kind: str, order_id: str, key: str) -> None:
        """Record that the idempotency ledger already held this step."""
        self._logger.warning(
            "saga_duplicate_event_skipped",
            event_kind=event_kind,
            order_id=order_id,
            idempotency_key=key,
        )

    def transition_rejected(self, order_id: str, state: str, event_kind: str) -> None:
        """Record that the order's saga state does not accept the event."""
        self._logger.warning(
            "saga_transition_rejected",
            order_id=order_id,
            saga_state=state,
            event_kind=event_kind,
        )

    def order_not_found(self, event_kind: str, order_id: str) -> None:
        """Record that an event referenced an unknown order."""
        self._logger.error(
            "saga_order_not_found", event_kind=event_kind, order_id=order_id
        )

    def inventory_released(self, order_id: str) -> None:
        """Record that compensation gave reserved stock back."""
        self._logger.info("saga_inventory_released", order_id=order_id)

    def step_completed(
        self,
        order_id: str,
        action: str,
        succeeded: bool,
        next_state: str,
        follow_up: str | None,
    ) -> None:
        """Record that a saga step committed."""
        self._logger.info(
            "saga_step_completed",
            order_id=order_id,
            action=action,
            succeeded=succeeded,
            saga_state=next_state,
            follow_up=follow_up,
        )
