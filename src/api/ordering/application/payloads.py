"""Validation of incoming saga events.

Broker deliveries arrive as an event kind plus an untyped JSON object.
They are validated here into a ``SagaEvent``: the kind is the
discriminant and the payload follows the camelCase wire contract shared
by every saga event kind.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ordering.domain.saga import SagaEventKind
from ordering.domain.value_objects import OrderId
from ordering.ports.exceptions import InvalidEventPayloadError


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class OrderItemPayload(_WireModel):
    """One line item on the wire."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0)


class OrderEventPayload(_WireModel):
    """Payload of every saga event kind."""

    order_id: str
    user_id: str = Field(..., min_length=1)
    items: list[OrderItemPayload] = Field(..., min_length=1)
    total: Decimal = Field(..., ge=0)

    @field_validator("order_id")
    @classmethod
    def _order_id_is_ulid(cls, value: str) -> str:
        OrderId.from_string(value)
        return value


class SagaEvent(BaseModel):
    """A validated saga event: kind discriminant plus typed payload."""

    model_config = ConfigDict(frozen=True)

    kind: SagaEventKind
    payload: OrderEventPayload

    @property
    def order_id(self) -> OrderId:
        """Correlation id of the saga this event belongs to."""
        return OrderId(value=self.payload.order_id)


def parse_saga_event(event_kind: str, payload: dict[str, Any]) -> SagaEvent:
    """Validate a raw delivery.

    Args:
        event_kind: Routing key the message arrived with
        payload: Decoded JSON body

    Returns:
        The validated event

    Raises:
        InvalidEventPayloadError: If the kind is not a saga event kind or the
            payload does not match the wire contract
    """
    try:
        return SagaEvent.model_validate({"kind": event_kind, "payload": payload})
    except ValidationError as e:
        raise InvalidEventPayloadError(event_kind, str(e)) from e
