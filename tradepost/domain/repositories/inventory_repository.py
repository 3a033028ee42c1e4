"""Repository interface for the inventory ledger."""

from abc import ABC, abstractmethod
from typing import Optional


class InventoryRepository(ABC):
    """Authoritative available quantity per product."""

    @abstractmethod
    async def decrement(self, product_id: int, quantity: int) -> None:
        """Decrement stock iff at least ``quantity`` units are available.

        Must be a single guarded conditional update evaluated inside the
        caller's transaction, never a read followed by a blind write.

        Args:
            product_id: Product to decrement
            quantity: Units sold

        Raises:
            StockError: If fewer than ``quantity`` units remain
        """
        pass

    @abstractmethod
    async def get_available(self, product_id: int) -> Optional[int]:
        """Current available quantity, or None for unknown/deleted products."""
        pass
