"""Database models."""

from .base import Base
from .cart_model import CartItemModel, CartModel
from .catalog_model import ProductModel, SellerModel, UserModel
from .order_model import (
    OrderItemModel,
    OrderModel,
    OrderStatusHistoryModel,
    PaymentSettlementModel,
    SellerNoteModel,
)

__all__ = [
    "Base",
    "CartItemModel",
    "CartModel",
    "ProductModel",
    "SellerModel",
    "UserModel",
    "OrderItemModel",
    "OrderModel",
    "OrderStatusHistoryModel",
    "PaymentSettlementModel",
    "SellerNoteModel",
]
