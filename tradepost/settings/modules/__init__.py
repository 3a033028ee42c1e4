from tradepost.settings.modules.app_settings import AppSettings, get_app_settings
from tradepost.settings.modules.checkout_settings import CheckoutSettings
from tradepost.settings.modules.integrations_settings import SlackSettings
from tradepost.settings.modules.payment_settings import PaystackSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "CheckoutSettings",
    "PaystackSettings",
    "SlackSettings",
]
