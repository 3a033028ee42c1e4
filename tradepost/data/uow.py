"""Unit of Work pattern for atomic transactions."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tradepost.domain.value_objects import ExecutionID

from .repositories.cart_repository_impl import SqlAlchemyCartRepository
from .repositories.catalog_repository_impl import SqlAlchemyCatalogRepository
from .repositories.inventory_repository_impl import SqlAlchemyInventoryRepository
from .repositories.order_repository_impl import SqlAlchemyOrderRepository
from .repositories.settlement_repository_impl import SqlAlchemySettlementRepository


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories
    """

    def __init__(self, session_factory: async_sessionmaker, currency: str = "NGN") -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
            currency: Currency used when mapping catalog prices
        """
        self._session_factory = session_factory
        self._currency = currency
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None

        # Lazy-loaded repositories
        self._order_repository: Optional[SqlAlchemyOrderRepository] = None
        self._inventory_repository: Optional[SqlAlchemyInventoryRepository] = None
        self._catalog_repository: Optional[SqlAlchemyCatalogRepository] = None
        self._cart_repository: Optional[SqlAlchemyCartRepository] = None
        self._settlement_repository: Optional[SqlAlchemySettlementRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception; always release the session."""
        if exc_type is not None:
            await self._session.rollback()
        await self._session.close()

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository."""
        session = self._require_session()
        if self._order_repository is None:
            self._order_repository = SqlAlchemyOrderRepository(session)
        return self._order_repository

    @property
    def inventory(self) -> SqlAlchemyInventoryRepository:
        session = self._require_session()
        if self._inventory_repository is None:
            self._inventory_repository = SqlAlchemyInventoryRepository(session)
        return self._inventory_repository

    @property
    def catalog(self) -> SqlAlchemyCatalogRepository:
        session = self._require_session()
        if self._catalog_repository is None:
            self._catalog_repository = SqlAlchemyCatalogRepository(session, self._currency)
        return self._catalog_repository

    @property
    def carts(self) -> SqlAlchemyCartRepository:
        session = self._require_session()
        if self._cart_repository is None:
            self._cart_repository = SqlAlchemyCartRepository(session)
        return self._cart_repository

    @property
    def settlements(self) -> SqlAlchemySettlementRepository:
        session = self._require_session()
        if self._settlement_repository is None:
            self._settlement_repository = SqlAlchemySettlementRepository(session)
        return self._settlement_repository

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self._require_session().commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self._require_session().rollback()


def create_uow(session_factory: async_sessionmaker, currency: str = "NGN") -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory
        currency: Catalog currency

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory, currency)
