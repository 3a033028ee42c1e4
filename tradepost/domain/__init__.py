"""Domain layer - pure domain models and interfaces."""

from .entities import CheckoutIntent, Order, OrderItem, OrderStatus
from .repositories import InventoryRepository, OrderRepository
from .value_objects import ExecutionID, FeeSplit, Money, OrderNumber, PaymentReference

__all__ = [
    "CheckoutIntent",
    "ExecutionID",
    "FeeSplit",
    "InventoryRepository",
    "Money",
    "Order",
    "OrderItem",
    "OrderNumber",
    "OrderRepository",
    "OrderStatus",
    "PaymentReference",
]
