"""Domain-Oriented Observability for the Ordering application layer."""

from ordering.application.observability.order_service_probe import (
    DefaultOrderServiceProbe,
    OrderServiceProbe,
)
from ordering.application.observability.saga_probe import DefaultSagaProbe, SagaProbe

__all__ = [
    "DefaultOrderServiceProbe",
    "DefaultSagaProbe",
    "OrderServiceProbe",
    "SagaProbe",
]
