"""Domain value objects."""

from .value_objects import ExecutionID, Money, PaymentReference, SellerIdentity
from .order_number import OrderNumber
from .financial import FeeSplit, validate_fee_rate

__all__ = [
    "ExecutionID",
    "Money",
    "PaymentReference",
    "SellerIdentity",
    "OrderNumber",
    "FeeSplit",
    "validate_fee_rate",
]
