"""
Test settings loading from the environment.

This test verifies that every settings section loads with its defaults,
honours its environment variable names, and rejects invalid values.
"""
from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from tradepost.settings import CheckoutSettings, get_app_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_app_settings.cache_clear()
    yield
    get_app_settings.cache_clear()


def test_defaults(monkeypatch):
    for key in (
        "TRADEPOST_PLATFORM_FEE_RATE",
        "TRADEPOST_MINIMUM_ORDER_AMOUNT",
        "PAYMENT_GATEWAY",
        "PAYSTACK_BASE_URL",
        "TRADEPOST_SLACK_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)

    settings = get_app_settings()

    assert settings.checkout.platform_fee_rate == Decimal("0.05")
    assert settings.checkout.minimum_order_amount == Decimal("4000")
    assert settings.checkout.currency == "NGN"
    assert settings.checkout.payout_delay.days == 1
    assert settings.checkout.delivery_lead_time.days == 7
    assert settings.paystack.gateway == "paystack"
    assert settings.paystack.base_url == "https://api.paystack.co"
    assert settings.slack.enabled is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TRADEPOST_PLATFORM_FEE_RATE", "0.075")
    monkeypatch.setenv("TRADEPOST_PAYOUT_DELAY_DAYS", "3")
    monkeypatch.setenv("PAYSTACK_SECRET_KEY", "sk_live_example")
    monkeypatch.setenv("PAYSTACK_MAX_RETRIES", "0")
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.test/y")

    settings = get_app_settings()

    assert settings.checkout.platform_fee_rate == Decimal("0.075")
    assert settings.checkout.payout_delay.days == 3
    assert settings.paystack.secret_key == "sk_live_example"
    assert settings.paystack.max_retries == 0
    assert settings.slack.webhook_url == "https://hooks.slack.test/y"


def test_settings_are_cached():
    assert get_app_settings() is get_app_settings()


@pytest.mark.parametrize("rate", ["1", "1.5", "-0.01"])
def test_fee_rate_out_of_range_is_rejected(monkeypatch, rate):
    monkeypatch.setenv("TRADEPOST_PLATFORM_FEE_RATE", rate)
    with pytest.raises(ValidationError):
        CheckoutSettings()
