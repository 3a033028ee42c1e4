"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal

from tradepost.domain.entities.catalog import Buyer, Product, Shop
from tradepost.domain.entities.order import (
    DeliveryDetails,
    Order,
    OrderItem,
    StatusChange,
)
from tradepost.domain.entities.order_status import OrderStatus, PaymentStatus, PayoutStatus
from tradepost.domain.value_objects import Money, OrderNumber

from .models.catalog_model import ProductModel, SellerModel, UserModel
from .models.order_model import OrderItemModel, OrderModel, OrderStatusHistoryModel


def _money(value, currency: str) -> Money:
    return Money(amount=Decimal(str(value)), currency=currency)


class OrderItemMapper:
    """Static mapper for OrderItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel, currency: str) -> OrderItem:
        """Convert ORM model to domain entity.

        Args:
            model: OrderItemModel instance
            currency: Currency of the parent order

        Returns:
            OrderItem domain entity
        """
        return OrderItem(
            id=model.id,
            product_id=model.product_id,
            product_name=model.product_name,
            product_price=_money(model.product_price, currency),
            quantity=model.quantity,
            subtotal=_money(model.subtotal, currency),
        )

    @staticmethod
    def to_persistence(entity: OrderItem) -> OrderItemModel:
        """Convert domain entity to ORM model.

        Args:
            entity: OrderItem domain entity

        Returns:
            OrderItemModel instance
        """
        return OrderItemModel(
            product_id=entity.product_id,
            product_name=entity.product_name,
            product_price=entity.product_price.amount,
            quantity=entity.quantity,
            subtotal=entity.subtotal.amount,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested items."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate (with nested items).

        Args:
            model: OrderModel instance (items must be loaded)

        Returns:
            Order domain aggregate
        """
        currency = model.currency or "NGN"
        items = [OrderItemMapper.to_domain(item, currency) for item in model.items]

        return Order(
            id=model.id,
            order_number=OrderNumber(value=model.order_number),
            buyer_id=model.buyer_id,
            seller_id=model.seller_id,
            payment_reference=model.payment_reference,
            delivery=DeliveryDetails(
                name=model.delivery_name,
                phone=model.delivery_phone,
                address=model.delivery_address,
                notes=model.notes,
            ),
            total_amount=_money(model.total_amount, currency),
            platform_fee=_money(model.platform_fee, currency),
            seller_amount=_money(model.seller_amount, currency),
            items=items,
            status=OrderStatus(model.status),
            payment_status=PaymentStatus(model.payment_status),
            payout_status=PayoutStatus(model.payout_status),
            payout_date=model.payout_date,
            estimated_delivery_date=model.estimated_delivery_date,
            ready_for_pickup_at=model.ready_for_pickup_at,
            shipped_at=model.shipped_at,
            delivered_at=model.delivered_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert domain aggregate to ORM model (with nested items).

        Args:
            entity: Order domain aggregate

        Returns:
            OrderModel instance
        """
        order_model = OrderModel(
            order_number=entity.order_number.value,
            buyer_id=entity.buyer_id,
            seller_id=entity.seller_id,
            total_amount=entity.total_amount.amount,
            platform_fee=entity.platform_fee.amount,
            seller_amount=entity.seller_amount.amount,
            currency=entity.total_amount.currency,
            status=entity.status.value,
            payment_status=entity.payment_status.value,
            payment_reference=entity.payment_reference,
            delivery_name=entity.delivery.name,
            delivery_phone=entity.delivery.phone,
            delivery_address=entity.delivery.address,
            notes=entity.delivery.notes,
            estimated_delivery_date=entity.estimated_delivery_date,
            payout_status=entity.payout_status.value,
            payout_date=entity.payout_date,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

        order_model.items = [
            OrderItemMapper.to_persistence(item) for item in entity.items
        ]

        return order_model


class StatusChangeMapper:
    """Static mapper for StatusChange ↔ OrderStatusHistoryModel."""

    @staticmethod
    def to_domain(model: OrderStatusHistoryModel) -> StatusChange:
        return StatusChange(
            order_id=model.order_id,
            old_status=OrderStatus(model.old_status) if model.old_status else None,
            new_status=OrderStatus(model.new_status),
            changed_by=model.changed_by,
            notes=model.notes,
            changed_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: StatusChange) -> OrderStatusHistoryModel:
        return OrderStatusHistoryModel(
            order_id=entity.order_id,
            old_status=entity.old_status.value if entity.old_status else None,
            new_status=entity.new_status.value,
            changed_by=entity.changed_by,
            notes=entity.notes,
            created_at=entity.changed_at,
        )


class CatalogMapper:
    """Static mappers for catalog collaborator rows."""

    @staticmethod
    def buyer(model: UserModel) -> Buyer:
        return Buyer(
            user_id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            phone=model.phone,
        )

    @staticmethod
    def shop(model: SellerModel) -> Shop:
        return Shop(
            seller_id=model.id,
            user_id=model.user_id,
            shop_name=model.shop_name,
            shop_slug=model.shop_slug,
            payment_subaccount_code=model.payment_subaccount_code,
        )

    @staticmethod
    def product(model: ProductModel, currency: str) -> Product:
        return Product(
            product_id=model.id,
            seller_id=model.seller_id,
            name=model.name,
            price=_money(model.price, currency),
            quantity_available=model.quantity_available,
        )
