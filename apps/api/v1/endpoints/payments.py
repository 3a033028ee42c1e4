"""Payment gateway webhook endpoint."""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from tradepost.application.interfaces import IPaymentGateway
from tradepost.application.services import SettlementService
from tradepost.domain.exceptions import AuthorizationError, ValidationError

from apps.api.deps import get_payment_gateway, get_settlement_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payments", tags=["payments"])

SETTLING_EVENTS = {"charge.success"}


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    x_paystack_signature: Optional[str] = Header(None),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    service: SettlementService = Depends(get_settlement_service),
) -> dict:
    """Gateway callback; settles on successful charges, acknowledges the rest."""
    body = await request.body()
    if not gateway.verify_signature(body, x_paystack_signature):
        logger.warning("Rejected payment webhook with invalid signature")
        raise AuthorizationError("Invalid webhook signature")

    try:
        event = json.loads(body)
    except json.JSONDecodeError:
        raise ValidationError("Webhook body is not valid JSON")
    if not isinstance(event, dict):
        raise ValidationError("Webhook body must be a JSON object")

    event_type = event.get("event")
    if event_type not in SETTLING_EVENTS:
        logger.info(f"Ignoring payment webhook event {event_type!r}")
        return {"status": "ignored", "event": event_type}

    reference = (event.get("data") or {}).get("reference")
    result = await service.settle(reference)
    return {
        "status": "settled",
        "event": event_type,
        "reference": result.reference,
        "orders": [o.model_dump() for o in result.orders],
        "already_settled": result.already_settled,
    }
