"""
Financial value objects for platform fee handling.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass
from decimal import Decimal

from .value_objects import Money


def validate_fee_rate(rate: Decimal) -> Decimal:
    """Coerce and range-check a platform fee rate."""
    rate = Decimal(str(rate))
    if rate < 0 or rate >= 1:
        raise ValueError(f"Platform fee rate must be in [0, 1), got {rate}")
    return rate


@dataclass(frozen=True)
class FeeSplit:
    """
    Split of an order total between the platform and the seller.

    Balance Equation (MUST ALWAYS HOLD, exactly):
        platform_fee + seller_amount = total

    The fee is rounded to the cent and the seller receives the remainder,
    so no rounding residue is ever lost.
    """
    total: Money
    platform_fee: Money
    seller_amount: Money
    fee_rate: Decimal

    @classmethod
    def from_total(cls, total: Money, fee_rate: Decimal) -> 'FeeSplit':
        rate = validate_fee_rate(fee_rate)
        platform_fee = total.percentage(rate)
        return cls(
            total=total,
            platform_fee=platform_fee,
            seller_amount=total - platform_fee,
            fee_rate=rate,
        )

    def validate_balance(self) -> bool:
        """Validate the balance equation."""
        return self.platform_fee + self.seller_amount == self.total
