"""Shared fixtures: a seeded file-backed SQLite database, fake gateway and notifier."""

from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from tests.support import BUYER_ID, LAMP, RUG, SHOP_A, SHOP_B, make_request, seed_catalog
from tradepost.application.services import (
    CheckoutService,
    DeliveryConfirmationService,
    OrderQueryService,
    OrderStatusService,
    SettlementService,
)
from tradepost.data.models import Base
from tradepost.infrastructure.adapters.notifications import MockNotificationService
from tradepost.infrastructure.adapters.payments import FakeGateway
from tradepost.settings import CheckoutSettings


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    """Create and seed a SQLite file; seeding uses the synchronous driver."""
    path = tmp_path / "tradepost-test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        seed_catalog(session)
        session.commit()
    sync_engine.dispose()
    return path


@pytest.fixture
def session_factory(database_path: Path) -> async_sessionmaker:
    """Async session factory; NullPool gives every session its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{database_path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> MockNotificationService:
    return MockNotificationService()


@pytest.fixture
def checkout_settings() -> CheckoutSettings:
    return CheckoutSettings(
        platform_fee_rate=Decimal("0.05"),
        minimum_order_amount=Decimal("4000"),
        currency="NGN",
        estimated_delivery_days=7,
        payout_delay_days=1,
        payment_reference_prefix="TP",
    )


@pytest.fixture
def checkout_service(session_factory, gateway, checkout_settings) -> CheckoutService:
    return CheckoutService(session_factory, gateway, checkout_settings)


@pytest.fixture
def settlement_service(session_factory, gateway, checkout_settings, notifier) -> SettlementService:
    return SettlementService(session_factory, gateway, checkout_settings, notifier=notifier)


@pytest.fixture
def status_service(session_factory, notifier, checkout_settings) -> OrderStatusService:
    return OrderStatusService(session_factory, notifier, checkout_settings)


@pytest.fixture
def delivery_service(session_factory, notifier, checkout_settings) -> DeliveryConfirmationService:
    return DeliveryConfirmationService(session_factory, notifier, checkout_settings)


@pytest.fixture
def query_service(session_factory, checkout_settings) -> OrderQueryService:
    return OrderQueryService(session_factory, checkout_settings)


@pytest.fixture
def paid_checkout(checkout_service, gateway, settlement_service):
    """Run checkout for a buyer, mark it paid on the gateway and settle it."""

    async def _run(*groups, buyer_id: int = BUYER_ID):
        groups = groups or ((SHOP_A, [(LAMP, 2)]), (SHOP_B, [(RUG, 1)]))
        session = await checkout_service.checkout(buyer_id, make_request(*groups))
        gateway.complete(session.payment_reference)
        return await settlement_service.settle(session.payment_reference)

    return _run
