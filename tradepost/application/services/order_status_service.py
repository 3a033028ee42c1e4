"""Application service for the seller-driven order status workflow."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional, Union

from sqlalchemy.ext.asyncio import async_sessionmaker

from tradepost.application.dtos.order_dto import OrderDTO
from tradepost.application.interfaces import INotificationService, OrderStatusNotification
from tradepost.data.uow import UnitOfWork, create_uow
from tradepost.domain.clock import utcnow
from tradepost.domain.entities.order import Order, StatusChange
from tradepost.domain.entities.order_status import NOTIFIABLE_STATUSES, OrderStatus
from tradepost.domain.exceptions import NotFoundError
from tradepost.domain.value_objects import SellerIdentity
from tradepost.settings.modules.checkout_settings import CheckoutSettings

from .order_views import order_to_dto


logger = logging.getLogger(__name__)


async def apply_transition(
    uow: UnitOfWork,
    order: Order,
    new_status: OrderStatus,
    changed_by: Optional[int],
    now: datetime,
    payout_delay: timedelta,
    notes: Optional[str] = None,
) -> StatusChange:
    """Mutate the order and persist it with a compare-and-swap on the old status.

    Raises:
        InvalidTransitionError: Edge not in the workflow table
        ConcurrentUpdateError: Status changed since the order was read
    """
    expected = order.status
    change = order.apply_transition(new_status, changed_by, now, payout_delay, notes)
    await uow.orders.save_transition(order, expected, change)
    return change


async def notify_status_change(
    session_factory: async_sessionmaker,
    notifier: INotificationService,
    order: Order,
    change: StatusChange,
) -> None:
    """Best-effort buyer notification, sent only after the change is committed."""
    if change.new_status not in NOTIFIABLE_STATUSES:
        return

    try:
        uow = create_uow(session_factory)
        async with uow:
            buyer = await uow.catalog.get_buyer(order.buyer_id)
            shop = await uow.catalog.get_shop(order.seller_id)

        await notifier.send_order_status_update(
            OrderStatusNotification(
                order_id=order.id,
                order_number=order.order_number.value,
                status=change.new_status.value,
                buyer_email=buyer.email if buyer else None,
                buyer_name=buyer.full_name if buyer else None,
                shop_name=shop.shop_name if shop else None,
                changed_by=change.changed_by,
                notes=change.notes,
            )
        )
    except Exception as e:
        logger.error(
            f"Failed to send {change.new_status.value} notification for order "
            f"{order.order_number}: {e}",
            exc_info=True,
        )


class OrderStatusService:
    """
    Order status state machine driven by the owning seller.

    Each accepted transition updates the status, stamps its milestone, appends
    a history row and (for ``delivered``) schedules the payout, all in one
    transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        notifier: INotificationService,
        settings: CheckoutSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._notifier = notifier
        self._settings = settings
        self._clock = clock

    async def transition(
        self,
        order_id: int,
        seller: SellerIdentity,
        new_status: Union[str, OrderStatus],
        notes: Optional[str] = None,
    ) -> OrderDTO:
        """Move an order to ``new_status`` on behalf of its seller.

        Args:
            order_id: Order to update
            seller: Authenticated seller identity
            new_status: Target status name
            notes: Optional note for the history log

        Returns:
            OrderDTO reflecting the committed change

        Raises:
            ValidationError: Unknown status name
            NotFoundError: Unknown order
            AuthorizationError: Order belongs to another shop
            InvalidTransitionError: Illegal edge (message lists legal next states)
            ConcurrentUpdateError: Lost the compare-and-swap
        """
        target = new_status if isinstance(new_status, OrderStatus) else OrderStatus.parse(new_status)
        notes = (notes or "").strip() or None

        uow = create_uow(self._session_factory, self._settings.currency)
        async with uow:
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise NotFoundError("Order not found")
            order.ensure_seller(seller.seller_id)

            change = await apply_transition(
                uow,
                order,
                target,
                changed_by=seller.user_id,
                now=self._clock(),
                payout_delay=self._settings.payout_delay,
                notes=notes,
            )
            await uow.commit()

        logger.info(
            f"Order {order.order_number} moved {change.old_status.value} -> "
            f"{change.new_status.value} by seller {seller.seller_id}"
        )
        await notify_status_change(self._session_factory, self._notifier, order, change)
        return order_to_dto(order)
