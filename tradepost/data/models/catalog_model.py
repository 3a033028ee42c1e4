"""
SQLAlchemy ORM models for catalog collaborator tables.

Users, shops and products are owned by other subsystems; the settlement core
reads them, and writes only ``products.quantity_available`` (the inventory
ledger).
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)

from .base import Base


class UserModel(Base):
    """SQLAlchemy ORM model for users table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class SellerModel(Base):
    """SQLAlchemy ORM model for sellers (shops) table."""

    __tablename__ = "sellers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    shop_name = Column(String(255), nullable=False)
    shop_slug = Column(String(255), unique=True, nullable=False, index=True)
    payment_subaccount_code = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ProductModel(Base):
    """SQLAlchemy ORM model for products table (inventory ledger)."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False, index=True)
    name = Column(String(500), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity_available = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Soft delete
    deleted_at = Column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("quantity_available >= 0", name="ck_products_quantity_non_negative"),
    )
