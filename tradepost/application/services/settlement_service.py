"""Application service for settlement: turn a verified payment into orders."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from tradepost.application.dtos.checkout_dto import SettledOrderDTO, SettlementResponse
from tradepost.application.interfaces import INotificationService, IPaymentGateway
from tradepost.data.uow import create_uow
from tradepost.domain.clock import utcnow
from tradepost.domain.entities.checkout import CheckoutIntent
from tradepost.domain.entities.order import Order
from tradepost.domain.exceptions import (
    PaymentIncompleteError,
    PaymentVerificationError,
    StockError,
    ValidationError,
)
from tradepost.domain.value_objects import FeeSplit
from tradepost.settings.modules.checkout_settings import CheckoutSettings


logger = logging.getLogger(__name__)


class SettlementService:
    """
    Settlement engine.

    Safe to call any number of times for the same reference, from the buyer's
    polling endpoint and the gateway webhook alike:

    1. Idempotency guard: existing orders for the reference are returned as-is
    2. Gateway verification and metadata decoding
    3. One transaction: claim row, orders, items, stock decrements, cart clear
    4. A concurrent loser of the claim rolls back and returns the winner's orders
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        settings: CheckoutSettings,
        notifier: Optional[INotificationService] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize settlement service.

        Args:
            session_factory: SQLAlchemy async session factory
            gateway: Payment gateway adapter
            settings: Delivery lead time and currency
            notifier: Operations channel for payments that could not settle
            clock: Source of the settlement timestamp
        """
        self._session_factory = session_factory
        self._gateway = gateway
        self._settings = settings
        self._notifier = notifier
        self._clock = clock

    async def settle(self, reference: str) -> SettlementResponse:
        """Settle a payment reference.

        Args:
            reference: Checkout payment reference

        Returns:
            SettlementResponse listing one order per shop group

        Raises:
            ValidationError: Blank reference
            PaymentVerificationError: Gateway rejected the reference, metadata is
                unusable, or the paid amount differs from the checkout total
            PaymentIncompleteError: The payment has not succeeded
            StockError: Stock ran out between checkout and settlement
        """
        reference = (reference or "").strip()
        if not reference:
            raise ValidationError("Payment reference is required")

        existing = await self._existing_orders(reference)
        if existing:
            logger.info(f"Settlement {reference}: already settled ({len(existing)} order(s))")
            return self._response(reference, existing, already_settled=True)

        intent = await self._verify(reference)

        try:
            orders = await self._materialize(reference, intent)
        except IntegrityError:
            winners = await self._existing_orders(reference)
            if not winners:
                raise
            logger.info(
                f"Settlement {reference}: lost the claim race, returning "
                f"{len(winners)} order(s) created concurrently"
            )
            return self._response(reference, winners, already_settled=True)
        except StockError as e:
            logger.error(f"Settlement {reference} rolled back: {e.message}")
            await self._alert(
                f"Payment {reference} was captured but could not be settled: {e.message}"
            )
            raise

        logger.info(
            f"✅ Settlement {reference}: created {len(orders)} order(s) "
            f"for buyer {intent.buyer_id}"
        )
        return self._response(reference, orders, already_settled=False)

    async def _existing_orders(self, reference: str) -> List[Order]:
        uow = create_uow(self._session_factory, self._settings.currency)
        async with uow:
            return await uow.orders.find_by_payment_reference(reference)

    async def _verify(self, reference: str) -> CheckoutIntent:
        verification = await self._gateway.verify(reference)

        if not verification.is_successful:
            logger.info(f"Settlement {reference}: gateway status {verification.status!r}")
            raise PaymentIncompleteError(
                f"Payment not completed (status: {verification.status or 'unknown'})",
                gateway_status=verification.status,
            )

        try:
            intent = CheckoutIntent.from_metadata(verification.metadata)
        except ValueError as e:
            logger.error(f"Settlement {reference}: unusable gateway metadata: {e}")
            raise PaymentVerificationError("Payment metadata is missing or malformed") from e

        if intent.payment_reference != reference:
            raise PaymentVerificationError("Payment metadata belongs to a different reference")

        expected_minor = intent.total_amount.to_minor_units()
        if verification.amount_minor != expected_minor:
            logger.error(
                f"Settlement {reference}: paid {verification.amount_minor} minor units, "
                f"checkout total is {expected_minor}"
            )
            raise PaymentVerificationError("Paid amount does not match the checkout total")

        return intent

    async def _materialize(self, reference: str, intent: CheckoutIntent) -> List[Order]:
        uow = create_uow(self._session_factory, intent.currency)
        async with uow:
            now = self._clock()

            # Claim first: a concurrent settlement of the same reference fails here.
            await uow.settlements.claim(
                reference, intent.buyer_id, len(intent.groups), intent.total_amount
            )

            orders: List[Order] = []
            for group in intent.groups:
                order = Order.create_paid(
                    buyer_id=intent.buyer_id,
                    seller_id=group.seller_id,
                    payment_reference=reference,
                    delivery=intent.delivery,
                    items=[line.to_order_item() for line in group.lines],
                    split=FeeSplit.from_total(group.order_total, intent.fee_rate),
                    now=now,
                    delivery_lead_time=self._settings.delivery_lead_time,
                )
                await uow.orders.add(order)

                for line in group.lines:
                    await uow.inventory.decrement(line.product_id, line.quantity)

                orders.append(order)

            await uow.carts.clear_cart(intent.buyer_id)
            await uow.commit()

        logger.info(f"[{uow.execution_id}] Settlement {reference} committed")
        return orders

    async def _alert(self, message: str) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier.notify(message, severity=90)
        except Exception as e:
            logger.error(f"Failed to send settlement alert: {e}", exc_info=True)

    @staticmethod
    def _response(
        reference: str, orders: List[Order], already_settled: bool
    ) -> SettlementResponse:
        return SettlementResponse(
            reference=reference,
            orders=[
                SettledOrderDTO(order_id=order.id, order_number=order.order_number.value)
                for order in orders
            ],
            already_settled=already_settled,
        )
