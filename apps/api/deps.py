"""
FastAPI dependencies for dependency injection.

Identity comes from the authentication collaborator in front of this
service, which forwards the authenticated user id as ``X-User-Id``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tradepost.application.interfaces import INotificationService, IPaymentGateway
from tradepost.application.services import (
    CheckoutService,
    DeliveryConfirmationService,
    OrderQueryService,
    OrderStatusService,
    SettlementService,
)
from tradepost.data.uow import create_uow
from tradepost.domain.exceptions import AuthorizationError
from tradepost.domain.value_objects import SellerIdentity
from tradepost.infrastructure.adapters.notifications import build_notification_service
from tradepost.infrastructure.adapters.payments import get_gateway
from tradepost.infrastructure.database import config as database_config
from tradepost.settings import CheckoutSettings, get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_notification_service: Optional[INotificationService] = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory bound to the global engine."""
    return database_config.get_session_factory()


def get_payment_gateway() -> IPaymentGateway:
    return get_gateway()


def get_notification_service() -> INotificationService:
    global _notification_service
    if _notification_service is None:
        _notification_service = build_notification_service()
        logger.info(f"Created {type(_notification_service).__name__} instance")
    return _notification_service


def get_checkout_settings() -> CheckoutSettings:
    return get_app_settings().checkout


# =============================================================================
# SERVICES
# =============================================================================

def get_checkout_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    settings: CheckoutSettings = Depends(get_checkout_settings),
) -> CheckoutService:
    return CheckoutService(session_factory, gateway, settings)


def get_settlement_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    settings: CheckoutSettings = Depends(get_checkout_settings),
    notifier: INotificationService = Depends(get_notification_service),
) -> SettlementService:
    return SettlementService(session_factory, gateway, settings, notifier=notifier)


def get_order_status_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    notifier: INotificationService = Depends(get_notification_service),
    settings: CheckoutSettings = Depends(get_checkout_settings),
) -> OrderStatusService:
    return OrderStatusService(session_factory, notifier, settings)


def get_delivery_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    notifier: INotificationService = Depends(get_notification_service),
    settings: CheckoutSettings = Depends(get_checkout_settings),
) -> DeliveryConfirmationService:
    return DeliveryConfirmationService(session_factory, notifier, settings)


def get_order_query_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: CheckoutSettings = Depends(get_checkout_settings),
) -> OrderQueryService:
    return OrderQueryService(session_factory, settings)


# =============================================================================
# IDENTITY
# =============================================================================

def get_current_user_id(x_user_id: Optional[int] = Header(None)) -> int:
    """Authenticated user id forwarded by the auth layer."""
    if x_user_id is None:
        raise AuthorizationError("Authentication required")
    return x_user_id


async def get_current_seller(
    user_id: int = Depends(get_current_user_id),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> SellerIdentity:
    """Resolve the shop owned by the current user."""
    uow = create_uow(session_factory)
    async with uow:
        shop = await uow.catalog.get_shop_by_user(user_id)
    if shop is None:
        raise AuthorizationError("Not a seller")
    return SellerIdentity(user_id=user_id, seller_id=shop.seller_id)
