"""Application service for buyer delivery confirmation."""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from tradepost.application.dtos.order_dto import OrderDTO
from tradepost.application.interfaces import INotificationService
from tradepost.data.uow import create_uow
from tradepost.domain.clock import utcnow
from tradepost.domain.entities.order_status import OrderStatus
from tradepost.domain.exceptions import NotFoundError
from tradepost.settings.modules.checkout_settings import CheckoutSettings

from .order_status_service import apply_transition, notify_status_change
from .order_views import order_to_dto


logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_NOTE = "Buyer confirmed delivery"


class DeliveryConfirmationService:
    """Buyer-initiated ``in_transit -> delivered`` edge."""

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

    async def confirm(
        self, order_id: int, buyer_id: int, feedback: Optional[str] = None
    ) -> OrderDTO:
        """Mark an in-transit order delivered on behalf of its buyer.

        Raises:
            NotFoundError: Unknown order
            AuthorizationError: Caller is not the buyer
            AlreadyDeliveredError: Order is already delivered
            InvalidTransitionError: Order is not in transit
            ConcurrentUpdateError: Lost the compare-and-swap
        """
        note = (feedback or "").strip() or DEFAULT_CONFIRMATION_NOTE

        uow = create_uow(self._session_factory, self._settings.currency)
        async with uow:
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise NotFoundError("Order not found")
            order.check_delivery_confirmable(buyer_id)

            change = await apply_transition(
                uow,
                order,
                OrderStatus.DELIVERED,
                changed_by=buyer_id,
                now=self._clock(),
                payout_delay=self._settings.payout_delay,
                notes=note,
            )
            await uow.commit()

        logger.info(
            f"Order {order.order_number} delivery confirmed by buyer {buyer_id}; "
            f"payout scheduled for {order.payout_date:%Y-%m-%d %H:%M}"
        )
        await notify_status_change(self._session_factory, self._notifier, order, change)
        return order_to_dto(order)
