"""SQLAlchemy ORM models for Order aggregate and its audit tables."""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String(64), unique=True, nullable=False)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False, index=True)

    # Money (major units)
    total_amount = Column(Numeric(12, 2), nullable=False)
    platform_fee = Column(Numeric(12, 2), nullable=False)
    seller_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="NGN")

    # Lifecycle
    status = Column(String(32), nullable=False, default="pending", index=True)
    payment_status = Column(String(32), nullable=False, default="pending")
    payment_reference = Column(String(100), nullable=False, index=True)

    # Delivery snapshot
    delivery_name = Column(String(255), nullable=False)
    delivery_phone = Column(String(50), nullable=False)
    delivery_address = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)

    # Milestones
    estimated_delivery_date = Column(DateTime, nullable=True)
    ready_for_pickup_at = Column(DateTime, nullable=True)
    shipped_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)

    # Payout
    payout_status = Column(String(32), nullable=False, default="pending")
    payout_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationship to items
    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )

    __table_args__ = (
        Index("idx_orders_buyer_seller", "buyer_id", "seller_id"),
        Index("idx_orders_buyer_seller_created", "buyer_id", "seller_id", "created_at"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, order_number={self.order_number}, status={self.status})>"


class OrderItemModel(Base):
    """SQLAlchemy ORM model for order_items table."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product_name = Column(String(500), nullable=False)
    product_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationship back to order
    order = relationship("OrderModel", back_populates="items")


class OrderStatusHistoryModel(Base):
    """
    Append-only status audit log.

    Rows are inserted in the same transaction as the status change and are
    never updated or deleted.
    """

    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    old_status = Column(String(32), nullable=True)
    new_status = Column(String(32), nullable=False)
    changed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class SellerNoteModel(Base):
    """Internal seller notes on an order (never shown to the buyer)."""

    __tablename__ = "order_seller_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    note = Column(Text, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class PaymentSettlementModel(Base):
    """
    Settlement claim, one row per payment reference.

    The primary key makes settlement insert-first-wins: a concurrent second
    settlement of the same reference fails on this row and rolls back.
    """

    __tablename__ = "payment_settlements"

    payment_reference = Column(String(100), primary_key=True)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    order_count = Column(Integer, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    settled_at = Column(DateTime, default=datetime.utcnow, nullable=False)
