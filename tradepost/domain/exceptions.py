"""
Domain error taxonomy.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi

Every error carries a stable ``error_code`` and the HTTP status the API
layer maps it to, so handlers never branch on message text.
"""
from typing import Iterable, Optional


class TradepostError(Exception):
    """Base class for all settlement and fulfillment errors."""

    error_code: str = "tradepost_error"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(TradepostError):
    """Malformed or missing input."""

    error_code = "validation_error"
    status_code = 400


class NotFoundError(TradepostError):
    """Unknown product, shop, buyer or order."""

    error_code = "not_found"
    status_code = 404


class StockError(TradepostError):
    """Insufficient inventory at checkout time or at settlement time."""

    error_code = "insufficient_stock"
    status_code = 409

    def __init__(self, message: str, product_id: Optional[int] = None):
        super().__init__(message)
        self.product_id = product_id


class MinimumOrderError(TradepostError):
    """A shop group total is below the platform minimum."""

    error_code = "minimum_order_not_met"
    status_code = 400


class PaymentInitializationError(TradepostError):
    """The gateway could not open a hosted payment session."""

    error_code = "payment_initialization_failed"
    status_code = 502


class PaymentVerificationError(TradepostError):
    """The gateway rejected, did not recognise, or could not be asked about a reference."""

    error_code = "payment_verification_failed"
    status_code = 400


class PaymentIncompleteError(TradepostError):
    """The gateway knows the reference but the payment has not succeeded."""

    error_code = "payment_incomplete"
    status_code = 402

    def __init__(self, message: str, gateway_status: Optional[str] = None):
        super().__init__(message)
        self.gateway_status = gateway_status


class AuthorizationError(TradepostError):
    """The acting identity does not own the resource."""

    error_code = "forbidden"
    status_code = 403


class InvalidTransitionError(TradepostError):
    """Illegal order status change."""

    error_code = "invalid_transition"
    status_code = 400

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        allowed: Iterable[str] = (),
    ):
        super().__init__(message)
        self.current_status = current_status
        self.allowed = tuple(allowed)


class ConcurrentUpdateError(InvalidTransitionError):
    """The order status moved between read and compare-and-swap write."""

    error_code = "concurrent_update"
    status_code = 409


class AlreadyDeliveredError(TradepostError):
    """Delivery confirmation on an order that is already delivered."""

    error_code = "already_delivered"
    status_code = 400


__all__ = [
    "TradepostError",
    "ValidationError",
    "NotFoundError",
    "StockError",
    "MinimumOrderError",
    "PaymentInitializationError",
    "PaymentVerificationError",
    "PaymentIncompleteError",
    "AuthorizationError",
    "InvalidTransitionError",
    "ConcurrentUpdateError",
    "AlreadyDeliveredError",
]
