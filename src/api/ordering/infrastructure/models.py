"""SQLAlchemy ORM models for the Ordering context.

Products and inventory are the catalogue side read and decremented by
checkout and the saga; orders and order items belong to the Order aggregate.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, TimestampMixin

Money = Numeric(12, 2)


class ProductModel(Base, TimestampMixin):
    """ORM model for products table.

    Only the fields checkout needs: the current unit price is copied into
    each order item at creation.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ProductModel(id={self.id}, name={self.name}, price={self.price})>"


class InventoryModel(Base):
    """ORM model for inventory table.

    One stock row per product. The CHECK constraint backs the conditional
    decrement: quantity can never go below zero.
    """

    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )

    product_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<InventoryModel(product_id={self.product_id}, quantity={self.quantity})>"


class OrderModel(Base, TimestampMixin):
    """ORM model for orders table.

    ``status`` is what customers see; ``saga_state`` is the finer grained
    position in the fulfilment saga the status is derived from.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    total: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    saga_state: Mapped[str] = mapped_column(String(32), nullable=False)

    items: Mapped[list[OrderItemModel]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.id",
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OrderModel(id={self.id}, status={self.status}, "
            f"saga_state={self.saga_state})>"
        )


class OrderItemModel(Base):
    """ORM model for order_items table.

    ``price`` is the unit price snapshot taken at checkout.
    """

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("products.id", ondelete="RESTRICT"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)

    order: Mapped[OrderModel] = relationship(back_populates="items")

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OrderItemModel(order_id={self.order_id}, "
            f"product_id={self.product_id}, quantity={self.quantity})>"
        )
