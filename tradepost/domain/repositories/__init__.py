"""Repository interfaces."""

from .inventory_repository import InventoryRepository
from .order_repository import OrderRepository

__all__ = ["InventoryRepository", "OrderRepository"]
