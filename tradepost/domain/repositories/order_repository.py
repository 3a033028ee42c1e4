"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..entities.order import Order, StatusChange
from ..entities.order_status import OrderStatus


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Insert a new order with its items; assigns ``order.id``.

        Args:
            order: Freshly materialized Order aggregate

        Returns:
            The same order with database identifiers set
        """
        pass

    @abstractmethod
    async def find_by_id(self, order_id: int) -> Optional[Order]:
        """Retrieve order (with items) by primary key.

        Args:
            order_id: Order primary key

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_payment_reference(self, payment_reference: str) -> List[Order]:
        """Return every order created for a checkout.

        Args:
            payment_reference: Checkout idempotency key

        Returns:
            Orders sharing the reference (empty if not settled yet)
        """
        pass

    @abstractmethod
    async def save_transition(
        self, order: Order, expected_status: OrderStatus, change: StatusChange
    ) -> None:
        """Compare-and-swap the order status and append the history row.

        Args:
            order: Order already mutated by ``apply_transition``
            expected_status: Status the order had when it was read
            change: Audit record to append

        Raises:
            ConcurrentUpdateError: If the stored status is no longer ``expected_status``
        """
        pass

    @abstractmethod
    async def list_history(self, order_id: int) -> List[StatusChange]:
        """Status history for an order, oldest first."""
        pass

    @abstractmethod
    async def list_for_buyer(
        self, buyer_id: int, seller_id: Optional[int] = None
    ) -> List[Order]:
        """Buyer's orders, newest first, optionally restricted to one shop."""
        pass

    @abstractmethod
    async def list_for_seller(
        self,
        seller_id: int,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """Paid orders of a shop, newest first, plus the total match count."""
        pass
