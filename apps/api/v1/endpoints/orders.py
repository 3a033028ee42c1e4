"""Order endpoints for REST API (buyer and seller views, status workflow)."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from tradepost.application.dtos.order_dto import (
    AddNoteRequest,
    ConfirmDeliveryRequest,
    OrderDTO,
    OrderListDTO,
    SellerNoteDTO,
    StatusHistoryDTO,
    UpdateStatusRequest,
)
from tradepost.application.services import (
    DeliveryConfirmationService,
    OrderQueryService,
    OrderStatusService,
)
from tradepost.domain.value_objects import SellerIdentity

from apps.api.deps import (
    get_current_seller,
    get_current_user_id,
    get_delivery_service,
    get_order_query_service,
    get_order_status_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


# =============================================================================
# BUYER
# =============================================================================

@router.get("/user", response_model=List[OrderDTO])
async def list_user_orders(
    user_id: int = Depends(get_current_user_id),
    service: OrderQueryService = Depends(get_order_query_service),
) -> List[OrderDTO]:
    """List the current buyer's orders, newest first."""
    return await service.list_buyer_orders(user_id)


@router.get("/user/shop/{shop_slug}", response_model=List[OrderDTO])
async def list_user_orders_by_shop(
    shop_slug: str,
    user_id: int = Depends(get_current_user_id),
    service: OrderQueryService = Depends(get_order_query_service),
) -> List[OrderDTO]:
    """List the current buyer's orders from one shop."""
    return await service.list_buyer_orders(user_id, shop_slug=shop_slug)


# =============================================================================
# SELLER
# =============================================================================

@router.get("/seller/orders/{status}", response_model=OrderListDTO)
async def list_seller_orders(
    status: str,
    page: int = Query(default=1, description="Page number (1-based)"),
    limit: int = Query(default=20, description="Page size"),
    search: Optional[str] = Query(default=None, description="Order number or buyer name"),
    seller: SellerIdentity = Depends(get_current_seller),
    service: OrderQueryService = Depends(get_order_query_service),
) -> OrderListDTO:
    """List paid orders of the seller's shop, by status (or ``all``)."""
    return await service.list_seller_orders(
        seller, status=status, page=page, limit=limit, search=search
    )


@router.put("/seller/{order_id}/status", response_model=OrderDTO)
async def update_order_status(
    order_id: int,
    request: UpdateStatusRequest,
    seller: SellerIdentity = Depends(get_current_seller),
    service: OrderStatusService = Depends(get_order_status_service),
) -> OrderDTO:
    """Move an order along the fulfillment workflow.

    Args:
        order_id: Order to update
        request: Target status and optional note
        seller: Authenticated seller
        service: OrderStatusService instance

    Returns:
        OrderDTO after the transition
    """
    return await service.transition(order_id, seller, request.status, request.notes)


@router.post("/seller/{order_id}/notes", response_model=SellerNoteDTO)
async def add_seller_note(
    order_id: int,
    request: AddNoteRequest,
    seller: SellerIdentity = Depends(get_current_seller),
    service: OrderQueryService = Depends(get_order_query_service),
) -> SellerNoteDTO:
    """Attach an internal note to an order."""
    return await service.add_note(order_id, seller, request.note)


@router.get("/seller/{order_id}/notes", response_model=List[SellerNoteDTO])
async def list_seller_notes(
    order_id: int,
    seller: SellerIdentity = Depends(get_current_seller),
    service: OrderQueryService = Depends(get_order_query_service),
) -> List[SellerNoteDTO]:
    return await service.list_notes(order_id, seller)


# =============================================================================
# SINGLE ORDER (buyer or seller)
# =============================================================================

@router.get("/{order_id}", response_model=OrderDTO)
async def get_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    service: OrderQueryService = Depends(get_order_query_service),
) -> OrderDTO:
    """Order details with items."""
    return await service.get_order(order_id, user_id)


@router.get("/{order_id}/history", response_model=List[StatusHistoryDTO])
async def get_order_history(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    service: OrderQueryService = Depends(get_order_query_service),
) -> List[StatusHistoryDTO]:
    """Status history, oldest first."""
    return await service.get_history(order_id, user_id)


@router.post("/{order_id}/confirm-delivery", response_model=OrderDTO)
async def confirm_delivery(
    order_id: int,
    request: Optional[ConfirmDeliveryRequest] = Body(default=None),
    user_id: int = Depends(get_current_user_id),
    service: DeliveryConfirmationService = Depends(get_delivery_service),
) -> OrderDTO:
    """Buyer confirms an in-transit order arrived."""
    feedback = request.feedback if request else None
    return await service.confirm(order_id, user_id, feedback)
