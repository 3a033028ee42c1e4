"""Application service for the order read side and seller notes."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from tradepost.application.dtos.order_dto import (
    OrderDTO,
    OrderListDTO,
    SellerNoteDTO,
    StatusHistoryDTO,
)
from tradepost.data.uow import UnitOfWork, create_uow
from tradepost.domain.clock import utcnow
from tradepost.domain.entities.order import Order, SellerNote
from tradepost.domain.entities.order_status import OrderStatus
from tradepost.domain.exceptions import NotFoundError, ValidationError
from tradepost.domain.value_objects import SellerIdentity
from tradepost.settings.modules.checkout_settings import CheckoutSettings

from .order_views import history_to_dto, note_to_dto, order_to_dto


logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class OrderQueryService:
    """
    Buyer- and seller-scoped order queries.

    An order is visible to its buyer and to the owner of its shop; anyone
    else gets the same not-found answer as for a missing order.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: CheckoutSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._clock = clock

    def _uow(self) -> UnitOfWork:
        return create_uow(self._session_factory, self._settings.currency)

    # =========================================================================
    # BUYER VIEWS
    # =========================================================================

    async def list_buyer_orders(
        self, buyer_id: int, shop_slug: Optional[str] = None
    ) -> List[OrderDTO]:
        """Buyer's orders, newest first, optionally for one shop.

        Raises:
            NotFoundError: ``shop_slug`` does not name a shop
        """
        async with self._uow() as uow:
            seller_id = None
            if shop_slug is not None:
                shop = await uow.catalog.get_shop_by_slug(shop_slug)
                if shop is None:
                    raise NotFoundError("Shop not found")
                seller_id = shop.seller_id

            orders = await uow.orders.list_for_buyer(buyer_id, seller_id)
            return await self._with_shop_names(uow, orders)

    async def get_order(self, order_id: int, user_id: int) -> OrderDTO:
        """Order details with items, for its buyer or its seller."""
        async with self._uow() as uow:
            order = await self._visible_order(uow, order_id, user_id)
            shop = await uow.catalog.get_shop(order.seller_id)
            buyer = await uow.catalog.get_buyer(order.buyer_id)
            return order_to_dto(
                order,
                shop_name=shop.shop_name if shop else None,
                buyer_name=buyer.full_name if buyer else None,
            )

    async def get_history(self, order_id: int, user_id: int) -> List[StatusHistoryDTO]:
        """Status history, oldest first, for the order's buyer or seller."""
        async with self._uow() as uow:
            await self._visible_order(uow, order_id, user_id)
            changes = await uow.orders.list_history(order_id)
            names = await uow.catalog.get_buyers(
                c.changed_by for c in changes if c.changed_by is not None
            )
            return [history_to_dto(change, names) for change in changes]

    # =========================================================================
    # SELLER VIEWS
    # =========================================================================

    async def list_seller_orders(
        self,
        seller: SellerIdentity,
        status: str = "all",
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
    ) -> OrderListDTO:
        """Paid orders of the seller's shop, paginated, newest first.

        Raises:
            ValidationError: Unknown status or out-of-range paging
        """
        if page < 1:
            raise ValidationError("page must be at least 1")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        status_filter = None if status == "all" else OrderStatus.parse(status)
        search = (search or "").strip() or None

        async with self._uow() as uow:
            orders, total = await uow.orders.list_for_seller(
                seller.seller_id,
                status=status_filter,
                search=search,
                limit=limit,
                offset=(page - 1) * limit,
            )
            buyers = await uow.catalog.get_buyers(o.buyer_id for o in orders)
            shop = await uow.catalog.get_shop(seller.seller_id)

        shop_name = shop.shop_name if shop else None
        dtos = [
            order_to_dto(
                order,
                shop_name=shop_name,
                buyer_name=buyers[order.buyer_id].full_name if order.buyer_id in buyers else None,
            )
            for order in orders
        ]
        return OrderListDTO(
            orders=dtos,
            total=total,
            page=page,
            limit=limit,
            total_pages=(total + limit - 1) // limit,
        )

    async def add_note(self, order_id: int, seller: SellerIdentity, note: Optional[str]) -> SellerNoteDTO:
        """Attach an internal note to one of the seller's orders.

        Raises:
            ValidationError: Empty note
            NotFoundError: Unknown order or order of another shop
        """
        text = (note or "").strip()
        if not text:
            raise ValidationError("Note cannot be empty")

        async with self._uow() as uow:
            await self._seller_order(uow, order_id, seller)
            saved = await uow.orders.add_note(
                SellerNote(
                    order_id=order_id,
                    seller_id=seller.seller_id,
                    note=text,
                    created_by=seller.user_id,
                    created_at=self._clock(),
                )
            )
            names = await uow.catalog.get_buyers([seller.user_id])
            await uow.commit()

        logger.info(f"Seller {seller.seller_id} added note {saved.id} to order {order_id}")
        return note_to_dto(saved, names)

    async def list_notes(self, order_id: int, seller: SellerIdentity) -> List[SellerNoteDTO]:
        """Notes on one of the seller's orders, newest first."""
        async with self._uow() as uow:
            await self._seller_order(uow, order_id, seller)
            notes = await uow.orders.list_notes(order_id, seller.seller_id)
            names = await uow.catalog.get_buyers(n.created_by for n in notes)
            return [note_to_dto(n, names) for n in notes]

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    async def _visible_order(uow: UnitOfWork, order_id: int, user_id: int) -> Order:
        order = await uow.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found or access denied")

        shop = await uow.catalog.get_shop_by_user(user_id)
        if not order.is_visible_to(user_id, shop.seller_id if shop else None):
            raise NotFoundError("Order not found or access denied")
        return order

    @staticmethod
    async def _seller_order(uow: UnitOfWork, order_id: int, seller: SellerIdentity) -> Order:
        order = await uow.orders.find_by_id(order_id)
        if order is None or order.seller_id != seller.seller_id:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    async def _with_shop_names(uow: UnitOfWork, orders: List[Order]) -> List[OrderDTO]:
        names = {}
        for seller_id in {o.seller_id for o in orders}:
            shop = await uow.catalog.get_shop(seller_id)
            names[seller_id] = shop.shop_name if shop else None
        return [order_to_dto(o, shop_name=names.get(o.seller_id)) for o in orders]
