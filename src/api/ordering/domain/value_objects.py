"""Value objects for Ordering domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class OrderId:
    """Identifier for an Order aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> OrderId:
        """Generate a new OrderId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> OrderId:
        """Create OrderId from string value.

        Args:
            value: ULID string

        Returns:
            OrderId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid OrderId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class ProductId:
    """Identifier for a catalogue product."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> ProductId:
        """Generate a new ProductId using ULID."""
        return cls(value=str(ULID()))


class OrderStatus(StrEnum):
    """Customer-visible order status.

    PENDING moves to exactly one of the two terminal states.
    """

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class LineItem:
    """One product line of an order.

    The price is the unit price snapshot taken at checkout; it never
    follows later catalogue price changes.
    """

    product_id: ProductId
    quantity: int
    price: Decimal

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")
        if self.price < 0:
            raise ValueError(f"Price must not be negative, got {self.price}")

    @property
    def subtotal(self) -> Decimal:
        """Price times quantity."""
        return self.price * self.quantity
