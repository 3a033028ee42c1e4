"""SQLAlchemy implementation of OrderRepository."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tradepost.domain.entities.order import Order, SellerNote, StatusChange
from tradepost.domain.entities.order_status import OrderStatus, PaymentStatus
from tradepost.domain.exceptions import ConcurrentUpdateError
from tradepost.domain.repositories.order_repository import OrderRepository

from ..mappers import OrderMapper, StatusChangeMapper
from ..models.catalog_model import UserModel
from ..models.order_model import OrderModel, OrderStatusHistoryModel, SellerNoteModel


logger = logging.getLogger(__name__)


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def add(self, order: Order) -> Order:
        """Insert order and items, then copy generated ids back onto the aggregate."""
        model = OrderMapper.to_persistence(order)
        self._session.add(model)
        await self._session.flush()  # Propagate to DB without committing

        order.id = model.id
        for item, item_model in zip(order.items, model.items):
            item.id = item_model.id

        logger.info(f"Inserted order {order.order_number} (id={order.id})")
        return order

    async def find_by_id(self, order_id: int) -> Optional[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        )
        model = result.scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def find_by_payment_reference(self, payment_reference: str) -> List[Order]:
        result = await self._session.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.payment_reference == payment_reference)
            .order_by(OrderModel.id)
        )
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def save_transition(
        self, order: Order, expected_status: OrderStatus, change: StatusChange
    ) -> None:
        """Guarded status write: ``UPDATE ... WHERE id = :id AND status = :expected``."""
        result = await self._session.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order.id,
                OrderModel.status == expected_status.value,
            )
            .values(
                status=order.status.value,
                ready_for_pickup_at=order.ready_for_pickup_at,
                shipped_at=order.shipped_at,
                delivered_at=order.delivered_at,
                payout_status=order.payout_status.value,
                payout_date=order.payout_date,
                updated_at=order.updated_at,
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            logger.warning(
                f"Status CAS lost for order {order.id}: expected {expected_status.value}"
            )
            raise ConcurrentUpdateError(
                f"Order {order.id} was updated concurrently; "
                f"it is no longer {expected_status.value}",
                current_status=None,
            )

        self._session.add(StatusChangeMapper.to_persistence(change))
        await self._session.flush()

    async def list_history(self, order_id: int) -> List[StatusChange]:
        result = await self._session.execute(
            select(OrderStatusHistoryModel)
            .where(OrderStatusHistoryModel.order_id == order_id)
            .order_by(OrderStatusHistoryModel.created_at, OrderStatusHistoryModel.id)
        )
        return [StatusChangeMapper.to_domain(m) for m in result.scalars().all()]

    async def list_for_buyer(
        self, buyer_id: int, seller_id: Optional[int] = None
    ) -> List[Order]:
        query = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.buyer_id == buyer_id)
        )
        if seller_id is not None:
            query = query.where(OrderModel.seller_id == seller_id)

        result = await self._session.execute(
            query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def list_for_seller(
        self,
        seller_id: int,
        status: Optional[OrderStatus] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        conditions = [
            OrderModel.seller_id == seller_id,
            OrderModel.payment_status == PaymentStatus.PAID.value,
        ]
        if status is not None:
            conditions.append(OrderModel.status == status.value)

        ids_query = select(OrderModel.id).join(UserModel, OrderModel.buyer_id == UserModel.id)
        ids_query = ids_query.where(*conditions)
        if search:
            pattern = f"%{search.strip()}%"
            buyer_name = (
                func.coalesce(UserModel.first_name, "")
                + " "
                + func.coalesce(UserModel.last_name, "")
            )
            ids_query = ids_query.where(
                or_(OrderModel.order_number.ilike(pattern), buyer_name.ilike(pattern))
            )

        total = (
            await self._session.execute(
                select(func.count()).select_from(ids_query.subquery())
            )
        ).scalar_one()

        result = await self._session.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id.in_(ids_query))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        orders = [OrderMapper.to_domain(model) for model in result.scalars().all()]
        return orders, total

    # =========================================================================
    # SELLER NOTES
    # =========================================================================

    async def add_note(self, note: SellerNote) -> SellerNote:
        model = SellerNoteModel(
            order_id=note.order_id,
            seller_id=note.seller_id,
            note=note.note,
            created_by=note.created_by,
            created_at=note.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return SellerNote(
            id=model.id,
            order_id=model.order_id,
            seller_id=model.seller_id,
            note=model.note,
            created_by=model.created_by,
            created_at=model.created_at,
        )

    async def list_notes(self, order_id: int, seller_id: int) -> List[SellerNote]:
        result = await self._session.execute(
            select(SellerNoteModel)
            .where(
                SellerNoteModel.order_id == order_id,
                SellerNoteModel.seller_id == seller_id,
            )
            .order_by(SellerNoteModel.created_at.desc(), SellerNoteModel.id.desc())
        )
        return [
            SellerNote(
                id=m.id,
                order_id=m.order_id,
                seller_id=m.seller_id,
                note=m.note,
                created_by=m.created_by,
                created_at=m.created_at,
            )
            for m in result.scalars().all()
        ]
