# Settings package
from tradepost.settings.modules import (
    AppSettings,
    CheckoutSettings,
    PaystackSettings,
    SlackSettings,
    get_app_settings,
)

__all__ = [
    "get_app_settings",
    "AppSettings",
    "CheckoutSettings",
    "PaystackSettings",
    "SlackSettings",
]
