"""Settlement claims keyed by payment reference."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradepost.domain.value_objects import Money

from ..models.order_model import PaymentSettlementModel


class SqlAlchemySettlementRepository:
    """Insert-first-wins claim on a payment reference."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def claim(
        self, payment_reference: str, buyer_id: int, order_count: int, total: Money
    ) -> None:
        """Insert the claim row and flush immediately.

        Raises:
            sqlalchemy.exc.IntegrityError: If the reference is already claimed
        """
        self._session.add(
            PaymentSettlementModel(
                payment_reference=payment_reference,
                buyer_id=buyer_id,
                order_count=order_count,
                total_amount=total.amount,
            )
        )
        await self._session.flush()

    async def is_claimed(self, payment_reference: str) -> bool:
        result = await self._session.execute(
            select(PaymentSettlementModel.payment_reference).where(
                PaymentSettlementModel.payment_reference == payment_reference
            )
        )
        return result.scalar_one_or_none() is not None
