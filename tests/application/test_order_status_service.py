"""Tests for seller-driven status transitions and buyer delivery confirmation."""

from datetime import timedelta

import pytest
from sqlalchemy import update

from tests.support import BUYER_ID, OTHER_BUYER_ID, SELLER_A_USER_ID, SELLER_B_USER_ID, SHOP_A, SHOP_B
from tradepost.application.services import OrderStatusService
from tradepost.application.services.order_status_service import apply_transition
from tradepost.data.models import OrderModel
from tradepost.data.uow import create_uow
from tradepost.domain.entities import OrderStatus
from tradepost.domain.exceptions import (
    AlreadyDeliveredError,
    AuthorizationError,
    ConcurrentUpdateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from tradepost.domain.value_objects import OrderNumber, SellerIdentity
from tradepost.infrastructure.adapters.notifications import MockNotificationService

SELLER_A = SellerIdentity(user_id=SELLER_A_USER_ID, seller_id=SHOP_A)
SELLER_B = SellerIdentity(user_id=SELLER_B_USER_ID, seller_id=SHOP_B)


def order_id_for(settlement, shop_id):
    for order in settlement.orders:
        if OrderNumber(order.order_number).seller_id == shop_id:
            return order.order_id
    raise AssertionError(f"no order for shop {shop_id}")


async def advance(status_service, order_id, *statuses):
    for status in statuses:
        await status_service.transition(order_id, SELLER_A, status)


@pytest.mark.asyncio
async def test_transition_records_history(status_service, paid_checkout, session_factory, notifier):
    """pending -> processing writes one history row and sends nothing."""
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    dto = await status_service.transition(order_id, SELLER_A, "processing", notes="Packing now")

    assert dto.status == "processing"
    async with create_uow(session_factory) as uow:
        history = await uow.orders.list_history(order_id)
    assert len(history) == 1
    assert history[0].old_status == OrderStatus.PENDING
    assert history[0].new_status == OrderStatus.PROCESSING
    assert history[0].changed_by == SELLER_A_USER_ID
    assert history[0].notes == "Packing now"
    assert notifier.get_notifications() == []


@pytest.mark.asyncio
async def test_skipping_processing_is_rejected(status_service, paid_checkout, session_factory):
    """pending -> in_transit fails, names processing, and changes nothing."""
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    with pytest.raises(InvalidTransitionError) as exc_info:
        await status_service.transition(order_id, SELLER_A, "in_transit")

    assert "processing" in exc_info.value.message
    async with create_uow(session_factory) as uow:
        order = await uow.orders.find_by_id(order_id)
        history = await uow.orders.list_history(order_id)
    assert order.status == OrderStatus.PENDING
    assert history == []


@pytest.mark.asyncio
async def test_full_workflow_stamps_milestones_and_schedules_payout(
    status_service, paid_checkout, session_factory, notifier
):
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    await advance(status_service, order_id, "processing", "ready_for_pickup", "in_transit")
    dto = await status_service.transition(order_id, SELLER_A, "delivered")

    assert dto.status == "delivered"
    assert dto.payout_status == "scheduled"
    assert dto.payout_date - dto.delivered_at == timedelta(days=1)
    assert dto.ready_for_pickup_at is not None
    assert dto.shipped_at is not None

    async with create_uow(session_factory) as uow:
        order = await uow.orders.find_by_id(order_id)
        history = await uow.orders.list_history(order_id)
    assert order.payout_status.value == "scheduled"
    assert [h.new_status.value for h in history] == [
        "processing",
        "ready_for_pickup",
        "in_transit",
        "delivered",
    ]

    sent = notifier.get_notifications()
    assert [n["status"] for n in sent] == ["ready_for_pickup", "in_transit", "delivered"]
    assert all(n["buyer_email"] == "ada@example.com" for n in sent)
    assert sent[0]["shop_name"] == "Kemi Crafts"


@pytest.mark.asyncio
async def test_delivered_is_terminal(status_service, paid_checkout):
    order_id = order_id_for(await paid_checkout(), SHOP_A)
    await advance(status_service, order_id, "processing", "ready_for_pickup", "in_transit", "delivered")

    with pytest.raises(InvalidTransitionError, match="terminal"):
        await status_service.transition(order_id, SELLER_A, "in_transit")


@pytest.mark.asyncio
async def test_other_shop_cannot_transition(status_service, paid_checkout):
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    with pytest.raises(AuthorizationError):
        await status_service.transition(order_id, SELLER_B, "processing")


@pytest.mark.asyncio
async def test_unknown_status_and_order(status_service, paid_checkout):
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    with pytest.raises(ValidationError, match="Valid statuses"):
        await status_service.transition(order_id, SELLER_A, "shipped")

    with pytest.raises(NotFoundError):
        await status_service.transition(987654, SELLER_A, "processing")


@pytest.mark.asyncio
async def test_notification_failure_does_not_undo_transition(
    paid_checkout, session_factory, checkout_settings
):
    """A broken notifier is logged; the committed status stands."""
    order_id = order_id_for(await paid_checkout(), SHOP_A)
    service = OrderStatusService(
        session_factory, MockNotificationService(fail=True), checkout_settings
    )

    await advance(service, order_id, "processing")
    dto = await service.transition(order_id, SELLER_A, "ready_for_pickup")

    assert dto.status == "ready_for_pickup"
    async with create_uow(session_factory) as uow:
        assert (await uow.orders.find_by_id(order_id)).status == OrderStatus.READY_FOR_PICKUP


@pytest.mark.asyncio
async def test_stale_read_loses_compare_and_swap(paid_checkout, session_factory):
    """A status change that lands after our read makes our write fail."""
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    async with create_uow(session_factory) as uow:
        order = await uow.orders.find_by_id(order_id)

        async with session_factory() as other:
            await other.execute(
                update(OrderModel).where(OrderModel.id == order_id).values(status="processing")
            )
            await other.commit()

        with pytest.raises(ConcurrentUpdateError):
            await apply_transition(
                uow, order, OrderStatus.PROCESSING, SELLER_A_USER_ID,
                now=order.created_at, payout_delay=timedelta(days=1),
            )

    async with create_uow(session_factory) as uow:
        assert await uow.orders.list_history(order_id) == []


# =============================================================================
# DELIVERY CONFIRMATION
# =============================================================================

@pytest.mark.asyncio
async def test_buyer_confirms_delivery(
    status_service, delivery_service, paid_checkout, session_factory, notifier
):
    order_id = order_id_for(await paid_checkout(), SHOP_A)
    await advance(status_service, order_id, "processing", "ready_for_pickup", "in_transit")
    notifier.clear()

    dto = await delivery_service.confirm(order_id, BUYER_ID)

    assert dto.status == "delivered"
    assert dto.payout_status == "scheduled"
    assert dto.payout_date - dto.delivered_at == timedelta(days=1)

    async with create_uow(session_factory) as uow:
        last = (await uow.orders.list_history(order_id))[-1]
    assert last.old_status == OrderStatus.IN_TRANSIT
    assert last.new_status == OrderStatus.DELIVERED
    assert last.changed_by == BUYER_ID
    assert last.notes == "Buyer confirmed delivery"
    assert [n["status"] for n in notifier.get_notifications()] == ["delivered"]


@pytest.mark.asyncio
async def test_buyer_feedback_replaces_default_note(
    status_service, delivery_service, paid_checkout, session_factory
):
    order_id = order_id_for(await paid_checkout(), SHOP_A)
    await advance(status_service, order_id, "processing", "ready_for_pickup", "in_transit")

    await delivery_service.confirm(order_id, BUYER_ID, feedback="Arrived well packed")

    async with create_uow(session_factory) as uow:
        last = (await uow.orders.list_history(order_id))[-1]
    assert last.notes == "Arrived well packed"


@pytest.mark.asyncio
async def test_delivery_confirmation_errors(status_service, delivery_service, paid_checkout):
    order_id = order_id_for(await paid_checkout(), SHOP_A)

    with pytest.raises(InvalidTransitionError, match="must be in transit"):
        await delivery_service.confirm(order_id, BUYER_ID)

    await advance(status_service, order_id, "processing", "ready_for_pickup", "in_transit")

    with pytest.raises(AuthorizationError):
        await delivery_service.confirm(order_id, OTHER_BUYER_ID)

    await delivery_service.confirm(order_id, BUYER_ID)

    with pytest.raises(AlreadyDeliveredError):
        await delivery_service.confirm(order_id, BUYER_ID)

    with pytest.raises(NotFoundError):
        await delivery_service.confirm(987654, BUYER_ID)
