"""Exceptions for the Ordering bounded context.

These exceptions represent errors raised at the ports of the context.
They should be caught and handled by the application or presentation layer.
"""


class ProductNotFoundError(Exception):
    """Raised when checkout references products missing from the catalogue."""

    def __init__(self, product_ids: list[str]):
        super().__init__(f"Products not found: {', '.join(product_ids)}")
        self.product_ids = product_ids


class OrderNotFoundError(Exception):
    """Raised when an order cannot be found."""

    pass


class OrderCreationConflictError(Exception):
    """Raised when the store rejects an order because of a constraint conflict.

    Neither the order nor its OrderCreatedEvent was written.
    """

    pass


class InvalidEventPayloadError(Exception):
    """Raised when an incoming saga event does not match the wire contract."""

    def __init__(self, event_kind: str, message: str):
        super().__init__(f"Invalid {event_kind} payload: {message}")
        self.event_kind = event_kind
