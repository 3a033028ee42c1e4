"""Cart collaborator access: read on demand, cleared by settlement."""

import logging
from typing import List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.cart_model import CartItemModel, CartModel


logger = logging.getLogger(__name__)


class SqlAlchemyCartRepository:
    """Buyer cart rows living in the same database as orders."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def read_cart(self, buyer_id: int) -> List[Tuple[int, int]]:
        """Return ``(product_id, quantity)`` pairs in the buyer's cart."""
        result = await self._session.execute(
            select(CartItemModel.product_id, CartItemModel.quantity)
            .join(CartModel, CartItemModel.cart_id == CartModel.id)
            .where(CartModel.user_id == buyer_id)
            .order_by(CartItemModel.id)
        )
        return [(row.product_id, row.quantity) for row in result.all()]

    async def clear_cart(self, buyer_id: int) -> int:
        """Delete every cart item of the buyer; returns the number removed."""
        result = await self._session.execute(
            delete(CartItemModel)
            .where(
                CartItemModel.cart_id.in_(
                    select(CartModel.id).where(CartModel.user_id == buyer_id)
                )
            )
            .execution_options(synchronize_session=False)
        )
        logger.info(f"Cleared {result.rowcount} cart item(s) for buyer {buyer_id}")
        return result.rowcount
