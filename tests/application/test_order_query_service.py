"""Tests for the buyer and seller order views and seller notes."""

import pytest

from tests.support import (
    BUYER_ID,
    LAMP,
    MUG,
    OTHER_BUYER_ID,
    RUG,
    SELLER_A_USER_ID,
    SELLER_B_USER_ID,
    SHOP_A,
    SHOP_B,
)
from tradepost.domain.exceptions import NotFoundError, ValidationError
from tradepost.domain.value_objects import OrderNumber, SellerIdentity

SELLER_A = SellerIdentity(user_id=SELLER_A_USER_ID, seller_id=SHOP_A)
SELLER_B = SellerIdentity(user_id=SELLER_B_USER_ID, seller_id=SHOP_B)


def order_id_for(settlement, shop_id):
    for order in settlement.orders:
        if OrderNumber(order.order_number).seller_id == shop_id:
            return order.order_id
    raise AssertionError(f"no order for shop {shop_id}")


@pytest.mark.asyncio
async def test_buyer_sees_own_orders_newest_first(query_service, paid_checkout):
    first = await paid_checkout()
    second = await paid_checkout((SHOP_A, [(MUG, 3)]))

    orders = await query_service.list_buyer_orders(BUYER_ID)

    assert [o.id for o in orders][0] == second.orders[0].order_id
    assert {o.id for o in orders} == {o.order_id for o in first.orders} | {second.orders[0].order_id}
    assert {o.shop_name for o in orders} == {"Kemi Crafts", "Femi Weaves"}
    assert await query_service.list_buyer_orders(OTHER_BUYER_ID) == []


@pytest.mark.asyncio
async def test_buyer_orders_for_one_shop(query_service, paid_checkout):
    settlement = await paid_checkout()

    orders = await query_service.list_buyer_orders(BUYER_ID, shop_slug="femi-weaves")

    assert [o.id for o in orders] == [order_id_for(settlement, SHOP_B)]
    assert orders[0].items[0].product_id == RUG

    with pytest.raises(NotFoundError, match="Shop not found"):
        await query_service.list_buyer_orders(BUYER_ID, shop_slug="no-such-shop")


@pytest.mark.asyncio
async def test_order_visible_to_buyer_and_owning_seller_only(query_service, paid_checkout):
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    as_buyer = await query_service.get_order(order_id, BUYER_ID)
    as_seller = await query_service.get_order(order_id, SELLER_A_USER_ID)

    assert as_buyer.id == as_seller.id == order_id
    assert as_buyer.shop_name == "Kemi Crafts"
    assert as_buyer.buyer_name == "Ada Obi"
    assert as_buyer.items[0].product_name == "Brass Lamp"
    assert as_buyer.delivery_address == "12 Marina, Lagos"

    for stranger in (OTHER_BUYER_ID, SELLER_B_USER_ID):
        with pytest.raises(NotFoundError, match="access denied"):
            await query_service.get_order(order_id, stranger)

    with pytest.raises(NotFoundError, match="access denied"):
        await query_service.get_order(987654, BUYER_ID)


@pytest.mark.asyncio
async def test_history_names_who_changed_status(query_service, status_service, paid_checkout):
    order_id = order_id_for(await paid_checkout(), SHOP_A)
    await status_service.transition(order_id, SELLER_A, "processing", notes="Packing")
    await status_service.transition(order_id, SELLER_A, "ready_for_pickup")

    history = await query_service.get_history(order_id, BUYER_ID)

    assert [(h.old_status, h.new_status) for h in history] == [
        ("pending", "processing"),
        ("processing", "ready_for_pickup"),
    ]
    assert history[0].changed_by == SELLER_A_USER_ID
    assert history[0].changed_by_name == "Kemi Ade"
    assert history[0].notes == "Packing"

    with pytest.raises(NotFoundError):
        await query_service.get_history(order_id, OTHER_BUYER_ID)


# =============================================================================
# SELLER LISTING
# =============================================================================

@pytest.mark.asyncio
async def test_seller_listing_filters_and_paginates(query_service, status_service, paid_checkout):
    first = await paid_checkout()
    await paid_checkout((SHOP_A, [(MUG, 3)]), buyer_id=OTHER_BUYER_ID)
    await paid_checkout((SHOP_A, [(LAMP, 2)]))
    await status_service.transition(order_id_for(first, SHOP_A), SELLER_A, "processing")

    everything = await query_service.list_seller_orders(SELLER_A)
    assert everything.total == 3
    assert all(o.seller_id == SHOP_A for o in everything.orders)

    processing = await query_service.list_seller_orders(SELLER_A, status="processing")
    assert [o.id for o in processing.orders] == [order_id_for(first, SHOP_A)]

    page_two = await query_service.list_seller_orders(SELLER_A, page=2, limit=2)
    assert page_two.total == 3
    assert page_two.total_pages == 2
    assert len(page_two.orders) == 1

    by_name = await query_service.list_seller_orders(SELLER_A, search="tunde")
    assert by_name.total == 1
    assert by_name.orders[0].buyer_name == "Tunde Bello"

    number = everything.orders[0].order_number
    by_number = await query_service.list_seller_orders(SELLER_A, search=number)
    assert [o.order_number for o in by_number.orders] == [number]

    other_shop = await query_service.list_seller_orders(SELLER_B)
    assert other_shop.total == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"status": "lost"},
        {"page": 0},
        {"limit": 0},
        {"limit": 101},
    ],
)
async def test_seller_listing_rejects_bad_arguments(query_service, kwargs):
    with pytest.raises(ValidationError):
        await query_service.list_seller_orders(SELLER_A, **kwargs)


# =============================================================================
# SELLER NOTES
# =============================================================================

@pytest.mark.asyncio
async def test_seller_notes(query_service, paid_checkout):
    settlement = await paid_checkout()
    order_id = order_id_for(settlement, SHOP_A)

    first = await query_service.add_note(order_id, SELLER_A, "  Gift wrap requested  ")
    second = await query_service.add_note(order_id, SELLER_A, "Called buyer")

    assert first.note == "Gift wrap requested"
    assert first.created_by_name == "Kemi Ade"

    notes = await query_service.list_notes(order_id, SELLER_A)
    assert [n.id for n in notes] == [second.id, first.id]


@pytest.mark.asyncio
async def test_seller_note_errors(query_service, paid_checkout):
    settlement = await paid_checkout()
    order_id = order_id_for(settlement, SHOP_A)

    with pytest.raises(ValidationError, match="Note cannot be empty"):
        await query_service.add_note(order_id, SELLER_A, "   ")

    with pytest.raises(NotFoundError):
        await query_service.add_note(order_id, SELLER_B, "Not mine")

    with pytest.raises(NotFoundError):
        await query_service.list_notes(order_id, SELLER_B)
