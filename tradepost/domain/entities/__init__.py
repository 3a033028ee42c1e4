"""Domain entities."""

from .catalog import Buyer, Product, Shop
from .checkout import CheckoutIntent, CheckoutLine, ShopGroup
from .order import DeliveryDetails, Order, OrderItem, SellerNote, StatusChange
from .order_status import (
    NOTIFIABLE_STATUSES,
    STATUS_WORKFLOW,
    OrderStatus,
    PaymentStatus,
    PayoutStatus,
    allowed_transitions,
    describe_allowed,
)

__all__ = [
    "Buyer",
    "Product",
    "Shop",
    "CheckoutIntent",
    "CheckoutLine",
    "ShopGroup",
    "DeliveryDetails",
    "Order",
    "OrderItem",
    "SellerNote",
    "StatusChange",
    "NOTIFIABLE_STATUSES",
    "STATUS_WORKFLOW",
    "OrderStatus",
    "PaymentStatus",
    "PayoutStatus",
    "allowed_transitions",
    "describe_allowed",
]
