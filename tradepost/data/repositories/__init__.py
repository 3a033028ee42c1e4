"""SQLAlchemy repository implementations."""

from .cart_repository_impl import SqlAlchemyCartRepository
from .catalog_repository_impl import SqlAlchemyCatalogRepository
from .inventory_repository_impl import SqlAlchemyInventoryRepository
from .order_repository_impl import SqlAlchemyOrderRepository
from .settlement_repository_impl import SqlAlchemySettlementRepository

__all__ = [
    "SqlAlchemyCartRepository",
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyInventoryRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemySettlementRepository",
]
