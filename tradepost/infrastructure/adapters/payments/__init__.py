"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- PaystackGateway for production
- FakeGateway for development and testing (PAYMENT_GATEWAY=fake)
"""
from typing import Optional

from tradepost.application.interfaces import IPaymentGateway
from tradepost.settings import get_app_settings

from .fake_gateway import FakeGateway
from .paystack_gateway import PaystackGateway

_current_gateway: Optional[IPaymentGateway] = None


def get_gateway() -> IPaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        settings = get_app_settings().paystack
        if settings.gateway.lower() == "fake":
            _current_gateway = FakeGateway(secret_key=settings.secret_key or "test-secret")
        else:
            _current_gateway = PaystackGateway(settings)
    return _current_gateway


def set_gateway(gateway: IPaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None


__all__ = ["FakeGateway", "PaystackGateway", "get_gateway", "set_gateway", "reset_gateway"]
