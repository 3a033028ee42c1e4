"""Application DTOs for checkout and settlement."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class CheckoutItemRequest(BaseModel):
    """One requested line; ``price`` is what the client displayed, if sent."""

    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., description="Units requested")
    price: Optional[Decimal] = Field(None, description="Client-side unit price (informational)")

    model_config = {"frozen": True}


class ShopOrderRequest(BaseModel):
    """Requested items for one shop."""

    seller_id: int = Field(..., description="Shop (seller) ID")
    items: List[CheckoutItemRequest] = Field(default_factory=list, description="Requested items")

    model_config = {"frozen": True}


class DeliveryDetailsDTO(BaseModel):
    """Delivery snapshot shared by every order of a checkout."""

    name: Optional[str] = Field(None, description="Recipient name")
    phone: Optional[str] = Field(None, description="Recipient phone")
    address: Optional[str] = Field(None, description="Delivery address")
    notes: Optional[str] = Field(None, description="Delivery notes")

    model_config = {"frozen": True}


class CheckoutRequest(BaseModel):
    """Request DTO for starting a checkout."""

    orders: List[ShopOrderRequest] = Field(default_factory=list, description="Shop groups")
    delivery_details: Optional[DeliveryDetailsDTO] = Field(None, description="Delivery details")

    model_config = {"frozen": True}


class PriceAdjustmentDTO(BaseModel):
    """A line whose client price differed from the live catalog price."""

    product_id: int
    client_price: Decimal
    current_price: Decimal

    model_config = {"frozen": True}


class CheckoutResponse(BaseModel):
    """Hosted payment session for the whole checkout."""

    session_url: str = Field(..., description="Gateway hosted payment page")
    access_code: Optional[str] = Field(None, description="Gateway access code")
    payment_reference: str = Field(..., description="Checkout idempotency key")
    total_amount: Decimal = Field(..., ge=0, description="Grand total across shops")
    platform_fee: Decimal = Field(..., ge=0, description="Platform fee on the grand total")
    currency: str = Field(default="NGN", description="Currency code")
    price_adjustments: List[PriceAdjustmentDTO] = Field(default_factory=list)

    model_config = {"frozen": True}


class SettledOrderDTO(BaseModel):
    """Identifier pair for an order created by settlement."""

    order_id: int
    order_number: str

    model_config = {"frozen": True}


class SettlementResponse(BaseModel):
    """Result of settling a payment reference."""

    reference: str = Field(..., description="Payment reference")
    orders: List[SettledOrderDTO] = Field(default_factory=list)
    already_settled: bool = Field(
        default=False, description="True when orders existed before this call"
    )

    model_config = {"frozen": True}
