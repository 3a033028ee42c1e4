"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    id: Optional[int] = Field(None, description="Order item ID")
    product_id: int = Field(..., description="Product ID")
    product_name: str = Field(..., description="Product name at checkout")
    product_price: Decimal = Field(..., ge=0, description="Unit price at checkout")
    quantity: int = Field(..., gt=0, description="Quantity ordered")
    subtotal: Decimal = Field(..., ge=0, description="product_price * quantity")

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: int
    order_number: str
    buyer_id: int
    seller_id: int
    shop_name: Optional[str] = None
    buyer_name: Optional[str] = None
    total_amount: Decimal
    platform_fee: Decimal
    seller_amount: Decimal
    currency: str = "NGN"
    status: str
    payment_status: str
    payment_reference: str
    delivery_name: str
    delivery_phone: str
    delivery_address: str
    notes: Optional[str] = None
    estimated_delivery_date: Optional[datetime] = None
    ready_for_pickup_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    payout_status: str
    payout_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemDTO] = Field(default_factory=list)

    model_config = {"frozen": True}


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    total: int = Field(..., ge=0, description="Total count")
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    total_pages: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class StatusHistoryDTO(BaseModel):
    """One status change, oldest first in listings."""

    old_status: Optional[str] = None
    new_status: str
    changed_by: Optional[int] = None
    changed_by_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"frozen": True}


class SellerNoteDTO(BaseModel):
    """Internal seller note."""

    id: int
    order_id: int
    note: str
    created_by: int
    created_by_name: Optional[str] = None
    created_at: datetime

    model_config = {"frozen": True}


class UpdateStatusRequest(BaseModel):
    """Seller request to move an order along the workflow."""

    status: str = Field(..., description="Target status")
    notes: Optional[str] = Field(None, description="Optional note for the history log")

    model_config = {"frozen": True}


class ConfirmDeliveryRequest(BaseModel):
    """Buyer delivery confirmation with optional feedback."""

    feedback: Optional[str] = Field(None, description="Replaces the default history note")

    model_config = {"frozen": True}


class AddNoteRequest(BaseModel):
    """Seller note body."""

    note: Optional[str] = Field(None, description="Note text")

    model_config = {"frozen": True}
