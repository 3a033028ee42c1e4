from datetime import timedelta
from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class CheckoutSettings(BaseSettings):
    """
    Platform money and scheduling rules.
    Loaded from environment / .env with the TRADEPOST_ prefix.
    """

    platform_fee_rate: Decimal = Field(default=Decimal("0.05"))
    minimum_order_amount: Decimal = Field(default=Decimal("4000"))
    currency: str = Field(default="NGN", min_length=3, max_length=3)
    estimated_delivery_days: int = Field(default=7, ge=0)
    payout_delay_days: int = Field(default=1, ge=0)
    payment_reference_prefix: str = Field(default="TP")

    model_config = {
        "env_prefix": "TRADEPOST_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("platform_fee_rate")
    @classmethod
    def _rate_in_range(cls, value: Decimal) -> Decimal:
        if value < 0 or value >= 1:
            raise ValueError("platform_fee_rate must be in [0, 1)")
        return value

    @property
    def delivery_lead_time(self) -> timedelta:
        return timedelta(days=self.estimated_delivery_days)

    @property
    def payout_delay(self) -> timedelta:
        return timedelta(days=self.payout_delay_days)
