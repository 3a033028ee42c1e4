"""Domain -> DTO transformations shared by the order services."""

from typing import Dict, Optional

from tradepost.application.dtos.order_dto import (
    OrderDTO,
    OrderItemDTO,
    SellerNoteDTO,
    StatusHistoryDTO,
)
from tradepost.domain.entities.catalog import Buyer
from tradepost.domain.entities.order import Order, SellerNote, StatusChange


def order_to_dto(
    order: Order, shop_name: Optional[str] = None, buyer_name: Optional[str] = None
) -> OrderDTO:
    """Transform Order domain entity to OrderDTO.

    Args:
        order: Order domain entity
        shop_name: Display name of the selling shop, if known
        buyer_name: Buyer full name, if known (seller views)

    Returns:
        OrderDTO instance
    """
    items = [
        OrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            product_price=item.product_price.amount,
            quantity=item.quantity,
            subtotal=item.subtotal.amount,
        )
        for item in order.items
    ]

    return OrderDTO(
        id=order.id,
        order_number=order.order_number.value,
        buyer_id=order.buyer_id,
        seller_id=order.seller_id,
        shop_name=shop_name,
        buyer_name=buyer_name,
        total_amount=order.total_amount.amount,
        platform_fee=order.platform_fee.amount,
        seller_amount=order.seller_amount.amount,
        currency=order.total_amount.currency,
        status=order.status.value,
        payment_status=order.payment_status.value,
        payment_reference=order.payment_reference,
        delivery_name=order.delivery.name,
        delivery_phone=order.delivery.phone,
        delivery_address=order.delivery.address,
        notes=order.delivery.notes,
        estimated_delivery_date=order.estimated_delivery_date,
        ready_for_pickup_at=order.ready_for_pickup_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
        payout_status=order.payout_status.value,
        payout_date=order.payout_date,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=items,
    )


def history_to_dto(change: StatusChange, names: Dict[int, Buyer]) -> StatusHistoryDTO:
    user = names.get(change.changed_by) if change.changed_by is not None else None
    return StatusHistoryDTO(
        old_status=change.old_status.value if change.old_status else None,
        new_status=change.new_status.value,
        changed_by=change.changed_by,
        changed_by_name=user.full_name if user else None,
        notes=change.notes,
        created_at=change.changed_at,
    )


def note_to_dto(note: SellerNote, names: Dict[int, Buyer]) -> SellerNoteDTO:
    user = names.get(note.created_by)
    return SellerNoteDTO(
        id=note.id,
        order_id=note.order_id,
        note=note.note,
        created_by=note.created_by,
        created_by_name=user.full_name if user else None,
        created_at=note.created_at,
    )
