"""Application service for checkout: revalidate the cart and open a payment session."""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from tradepost.application.dtos.checkout_dto import (
    CheckoutRequest,
    CheckoutResponse,
    DeliveryDetailsDTO,
    PriceAdjustmentDTO,
    ShopOrderRequest,
)
from tradepost.application.interfaces import IPaymentGateway
from tradepost.data.uow import UnitOfWork, create_uow
from tradepost.domain.entities.checkout import CheckoutIntent, CheckoutLine, ShopGroup
from tradepost.domain.entities.order import DeliveryDetails
from tradepost.domain.exceptions import (
    MinimumOrderError,
    NotFoundError,
    StockError,
    ValidationError,
)
from tradepost.domain.value_objects import Money, PaymentReference
from tradepost.settings.modules.checkout_settings import CheckoutSettings


logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Checkout aggregator.

    Responsibilities:
    - Validate the request shape and delivery details
    - Re-read live prices and stock (client prices are never trusted)
    - Enforce the per-shop minimum order value
    - Mint the payment reference and open one gateway session for all shops

    Nothing is persisted here; the checkout intent travels as gateway metadata.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        settings: CheckoutSettings,
    ) -> None:
        """Initialize checkout service.

        Args:
            session_factory: SQLAlchemy async session factory
            gateway: Payment gateway adapter
            settings: Fee, minimum order and reference rules
        """
        self._session_factory = session_factory
        self._gateway = gateway
        self._settings = settings

    async def checkout(self, buyer_id: int, request: CheckoutRequest) -> CheckoutResponse:
        """Price the checkout server side and open a hosted payment session.

        Args:
            buyer_id: Authenticated buyer
            request: Shop groups and delivery details

        Returns:
            CheckoutResponse with the session URL and payment reference

        Raises:
            ValidationError: Malformed groups, items or delivery details
            NotFoundError: Unknown buyer, shop or product
            StockError: A line exceeds live stock
            MinimumOrderError: A shop total is below the platform minimum
            PaymentInitializationError: The gateway refused the session
        """
        delivery = self._validate_request(request)

        uow = create_uow(self._session_factory, self._settings.currency)
        async with uow:
            buyer = await uow.catalog.get_buyer(buyer_id)
            if buyer is None:
                raise NotFoundError("User not found")

            groups: List[ShopGroup] = []
            adjustments: List[PriceAdjustmentDTO] = []
            for shop_request in request.orders:
                group, drift = await self._price_group(uow, shop_request)
                groups.append(group)
                adjustments.extend(drift)

        reference = PaymentReference.generate(
            buyer_id, prefix=self._settings.payment_reference_prefix
        )
        intent = CheckoutIntent(
            buyer_id=buyer_id,
            payment_reference=reference.value,
            groups=groups,
            delivery=delivery,
            fee_rate=self._settings.platform_fee_rate,
            currency=self._settings.currency,
        )

        session = await self._gateway.create_session(
            amount_minor=intent.total_amount.to_minor_units(),
            reference=reference.value,
            email=buyer.email,
            metadata=intent.to_metadata(),
        )

        logger.info(
            f"Checkout {reference.value} opened for buyer {buyer_id}: "
            f"{len(groups)} shop(s), total {intent.total_amount}"
        )
        if adjustments:
            logger.info(
                f"Checkout {reference.value}: {len(adjustments)} line(s) repriced from client values"
            )

        return CheckoutResponse(
            session_url=session.session_url,
            access_code=session.access_code,
            payment_reference=reference.value,
            total_amount=intent.total_amount.amount,
            platform_fee=intent.platform_fee.amount,
            currency=intent.currency,
            price_adjustments=adjustments,
        )

    def _validate_request(self, request: CheckoutRequest) -> DeliveryDetails:
        if not request.orders:
            raise ValidationError("Invalid order data")

        seen_sellers = set()
        for shop_request in request.orders:
            if shop_request.seller_id in seen_sellers:
                raise ValidationError(
                    f"Seller {shop_request.seller_id} appears more than once in the checkout"
                )
            seen_sellers.add(shop_request.seller_id)

            if not shop_request.items:
                raise ValidationError(f"Order for seller {shop_request.seller_id} has no items")

            seen_products = set()
            for item in shop_request.items:
                if item.quantity <= 0:
                    raise ValidationError(
                        f"Quantity for product {item.product_id} must be a positive integer"
                    )
                if item.product_id in seen_products:
                    raise ValidationError(
                        f"Product {item.product_id} appears more than once for seller "
                        f"{shop_request.seller_id}"
                    )
                seen_products.add(item.product_id)

        return self._validate_delivery(request.delivery_details)

    @staticmethod
    def _validate_delivery(details: Optional[DeliveryDetailsDTO]) -> DeliveryDetails:
        if details is None:
            raise ValidationError("Delivery details are required")

        name = (details.name or "").strip()
        phone = (details.phone or "").strip()
        address = (details.address or "").strip()
        if not (name and phone and address):
            raise ValidationError("Delivery details are required")

        notes = (details.notes or "").strip() or None
        return DeliveryDetails(name=name, phone=phone, address=address, notes=notes)

    async def _price_group(
        self, uow: UnitOfWork, shop_request: ShopOrderRequest
    ) -> Tuple[ShopGroup, List[PriceAdjustmentDTO]]:
        shop = await uow.catalog.get_shop(shop_request.seller_id)
        if shop is None:
            raise NotFoundError(f"Seller {shop_request.seller_id} not found")

        products = await uow.catalog.get_products(
            shop.seller_id, [item.product_id for item in shop_request.items]
        )

        lines: List[CheckoutLine] = []
        drift: List[PriceAdjustmentDTO] = []
        for item in shop_request.items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundError(f"Product {item.product_id} not found")
            if product.quantity_available < item.quantity:
                raise StockError(
                    f"Insufficient stock for {product.name}", product_id=product.product_id
                )

            lines.append(
                CheckoutLine(
                    product_id=product.product_id,
                    product_name=product.name,
                    product_price=product.price,
                    quantity=item.quantity,
                )
            )
            if item.price is not None and Money(item.price, product.price.currency) != product.price:
                drift.append(
                    PriceAdjustmentDTO(
                        product_id=product.product_id,
                        client_price=Decimal(item.price),
                        current_price=product.price.amount,
                    )
                )

        group = ShopGroup(seller_id=shop.seller_id, shop_name=shop.shop_name, lines=lines)
        minimum = Money(self._settings.minimum_order_amount, self._settings.currency)
        if group.order_total < minimum:
            raise MinimumOrderError(
                f"Minimum order value is {minimum.currency} {minimum.amount:,.2f} "
                f"per shop; {shop.shop_name} totals {group.order_total.amount:,.2f}"
            )
        return group, drift
