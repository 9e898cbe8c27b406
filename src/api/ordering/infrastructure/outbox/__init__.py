"""Outbox integration for the Ordering context."""

from ordering.infrastructure.outbox.serializer import OrderEventSerializer

__all__ = ["OrderEventSerializer"]
