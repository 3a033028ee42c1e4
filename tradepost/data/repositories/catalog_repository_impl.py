"""Read access to the catalog collaborator tables (users, sellers, products)."""

from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradepost.domain.entities.catalog import Buyer, Product, Shop

from ..mappers import CatalogMapper
from ..models.catalog_model import ProductModel, SellerModel, UserModel


class SqlAlchemyCatalogRepository:
    """Lookups of buyers, shops and live product prices/stock."""

    def __init__(self, session: AsyncSession, currency: str = "NGN") -> None:
        self._session = session
        self._currency = currency

    async def get_buyer(self, user_id: int) -> Optional[Buyer]:
        model = await self._session.get(UserModel, user_id)
        return CatalogMapper.buyer(model) if model else None

    async def get_buyers(self, user_ids: Iterable[int]) -> Dict[int, Buyer]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self._session.execute(select(UserModel).where(UserModel.id.in_(ids)))
        return {m.id: CatalogMapper.buyer(m) for m in result.scalars().all()}

    async def get_shop(self, seller_id: int) -> Optional[Shop]:
        model = await self._session.get(SellerModel, seller_id)
        return CatalogMapper.shop(model) if model else None

    async def get_shop_by_user(self, user_id: int) -> Optional[Shop]:
        result = await self._session.execute(
            select(SellerModel).where(SellerModel.user_id == user_id)
        )
        model = result.scalar_one_or_none()
        return CatalogMapper.shop(model) if model else None

    async def get_shop_by_slug(self, shop_slug: str) -> Optional[Shop]:
        result = await self._session.execute(
            select(SellerModel).where(SellerModel.shop_slug == shop_slug)
        )
        model = result.scalar_one_or_none()
        return CatalogMapper.shop(model) if model else None

    async def get_products(
        self, seller_id: int, product_ids: Iterable[int]
    ) -> Dict[int, Product]:
        """Live, non-deleted products of ``seller_id`` keyed by id."""
        ids = set(product_ids)
        if not ids:
            return {}
        result = await self._session.execute(
            select(ProductModel).where(
                ProductModel.id.in_(ids),
                ProductModel.seller_id == seller_id,
                ProductModel.deleted_at.is_(None),
            )
        )
        return {
            m.id: CatalogMapper.product(m, self._currency)
            for m in result.scalars().all()
        }
