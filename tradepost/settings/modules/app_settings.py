from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from tradepost.settings.modules.checkout_settings import CheckoutSettings
from tradepost.settings.modules.integrations_settings import SlackSettings
from tradepost.settings.modules.payment_settings import PaystackSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    checkout: CheckoutSettings
    paystack: PaystackSettings
    slack: SlackSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        checkout=CheckoutSettings(),
        paystack=PaystackSettings(),
        slack=SlackSettings(),
    )
