"""SQLAlchemy implementation of the inventory ledger."""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tradepost.domain.exceptions import StockError
from tradepost.domain.repositories.inventory_repository import InventoryRepository

from ..models.catalog_model import ProductModel


logger = logging.getLogger(__name__)


class SqlAlchemyInventoryRepository(InventoryRepository):
    """Inventory backed by ``products.quantity_available``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def decrement(self, product_id: int, quantity: int) -> None:
        """Conditional decrement; affects zero rows when stock is short."""
        if quantity <= 0:
            raise ValueError(f"Decrement quantity must be positive, got {quantity}")

        result = await self._session.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.quantity_available >= quantity,
                ProductModel.deleted_at.is_(None),
            )
            .values(quantity_available=ProductModel.quantity_available - quantity)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            available = await self.get_available(product_id)
            logger.warning(
                f"Stock decrement refused for product {product_id}: "
                f"requested={quantity} available={available}"
            )
            raise StockError(
                f"Insufficient stock for product {product_id}: "
                f"requested {quantity}, available {available or 0}",
                product_id=product_id,
            )

    async def get_available(self, product_id: int) -> Optional[int]:
        result = await self._session.execute(
            select(ProductModel.quantity_available).where(
                ProductModel.id == product_id,
                ProductModel.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()
