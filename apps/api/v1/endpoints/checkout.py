"""Checkout and payment verification endpoints."""

import logging

from fastapi import APIRouter, Depends

from tradepost.application.dtos.checkout_dto import (
    CheckoutRequest,
    CheckoutResponse,
    SettlementResponse,
)
from tradepost.application.services import CheckoutService, SettlementService

from apps.api.deps import get_checkout_service, get_current_user_id, get_settlement_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["checkout"])


@router.post("/create", response_model=CheckoutResponse)
async def create_checkout(
    request: CheckoutRequest,
    user_id: int = Depends(get_current_user_id),
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    """Price the cart server side and open a hosted payment session.

    Args:
        request: Shop groups and delivery details
        user_id: Authenticated buyer
        service: CheckoutService instance

    Returns:
        CheckoutResponse with the session URL and payment reference
    """
    return await service.checkout(user_id, request)


@router.get("/verify/{reference}", response_model=SettlementResponse)
async def verify_payment(
    reference: str,
    service: SettlementService = Depends(get_settlement_service),
) -> SettlementResponse:
    """Settle a payment reference (buyer polling after the hosted page).

    Safe to call repeatedly; later calls return the orders created by the first.
    """
    return await service.settle(reference)
