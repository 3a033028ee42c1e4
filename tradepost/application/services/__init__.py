"""Application services."""

from .checkout_service import CheckoutService
from .delivery_service import DeliveryConfirmationService
from .order_query_service import OrderQueryService
from .order_status_service import OrderStatusService
from .settlement_service import SettlementService

__all__ = [
    "CheckoutService",
    "DeliveryConfirmationService",
    "OrderQueryService",
    "OrderStatusService",
    "SettlementService",
]
