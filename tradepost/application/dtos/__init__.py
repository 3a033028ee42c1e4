"""Application DTOs."""

from .checkout_dto import (
    CheckoutItemRequest,
    CheckoutRequest,
    CheckoutResponse,
    DeliveryDetailsDTO,
    PriceAdjustmentDTO,
    SettledOrderDTO,
    SettlementResponse,
    ShopOrderRequest,
)
from .order_dto import (
    AddNoteRequest,
    ConfirmDeliveryRequest,
    OrderDTO,
    OrderItemDTO,
    OrderListDTO,
    SellerNoteDTO,
    StatusHistoryDTO,
    UpdateStatusRequest,
)

__all__ = [
    "AddNoteRequest",
    "CheckoutItemRequest",
    "CheckoutRequest",
    "CheckoutResponse",
    "ConfirmDeliveryRequest",
    "DeliveryDetailsDTO",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    "PriceAdjustmentDTO",
    "SellerNoteDTO",
    "SettledOrderDTO",
    "SettlementResponse",
    "ShopOrderRequest",
    "StatusHistoryDTO",
    "UpdateStatusRequest",
]
