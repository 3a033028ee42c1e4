"""Tests for order numbers and payment references."""

from datetime import datetime, timezone

import pytest

from tradepost.domain.value_objects import OrderNumber, PaymentReference


def test_order_number_format_is_shop_scoped():
    """ORD-<date>-<seller>-<6 hex> and the seller id can be read back."""
    number = OrderNumber.generate(42, datetime(2026, 3, 9, 12, 0))

    assert number.value.startswith("ORD-20260309-42-")
    assert len(number.value.rsplit("-", 1)[1]) == 6
    assert number.seller_id == 42


def test_order_numbers_do_not_collide_within_a_shop():
    """Two orders for the same shop in the same instant still differ."""
    now = datetime(2026, 3, 9, 12, 0)
    numbers = {OrderNumber.generate(7, now).value for _ in range(200)}
    assert len(numbers) == 200


@pytest.mark.parametrize("value", ["", "ORD-1-2", "ord-20260101-1-ABCDEF", "ORD-20260101-1-XYZ123"])
def test_order_number_rejects_malformed_values(value):
    """Only generated shapes are accepted."""
    with pytest.raises(ValueError):
        OrderNumber(value)


def test_payment_reference_embeds_time_and_buyer():
    """<prefix>-<epoch ms>-<buyer>-<16 hex>."""
    moment = datetime(2026, 1, 1, tzinfo=timezone.utc)
    reference = PaymentReference.generate(17, prefix="tp", now=moment)

    prefix, millis, buyer, token = reference.value.split("-")
    assert prefix == "TP"
    assert int(millis) == int(moment.timestamp() * 1000)
    assert buyer == "17"
    assert len(token) == 16
    assert reference.is_well_formed()


def test_payment_reference_treats_naive_time_as_utc():
    """A naive datetime is interpreted as UTC, not local time."""
    aware = PaymentReference.generate(1, now=datetime(2026, 1, 1, tzinfo=timezone.utc))
    naive = PaymentReference.generate(1, now=datetime(2026, 1, 1))
    assert aware.value.split("-")[1] == naive.value.split("-")[1]


def test_payment_references_are_unguessable():
    """Same buyer, same millisecond: the random suffix still differs."""
    moment = datetime(2026, 1, 1, tzinfo=timezone.utc)
    refs = {PaymentReference.generate(1, now=moment).value for _ in range(100)}
    assert len(refs) == 100


def test_blank_payment_reference_is_rejected():
    with pytest.raises(ValueError):
        PaymentReference("  ")
