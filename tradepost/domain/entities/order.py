"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ..exceptions import (
    AlreadyDeliveredError,
    AuthorizationError,
    InvalidTransitionError,
)
from ..value_objects import FeeSplit, Money, OrderNumber
from .order_status import (
    OrderStatus,
    PaymentStatus,
    PayoutStatus,
    allowed_transitions,
    describe_allowed,
    milestone_field,
)


@dataclass
class OrderItem:
    """Individual line item within an order; name and price are snapshots."""
    product_id: int
    product_name: str
    product_price: Money
    quantity: int
    subtotal: Money
    id: Optional[int] = None

    @classmethod
    def create(
        cls,
        product_id: int,
        product_name: str,
        product_price: Money,
        quantity: int,
    ) -> 'OrderItem':
        return cls(
            product_id=product_id,
            product_name=product_name,
            product_price=product_price,
            quantity=quantity,
            subtotal=product_price * quantity,
        )

    def calculate_total(self) -> Money:
        """Recalculate subtotal based on quantity and unit price."""
        calculated = self.product_price * self.quantity
        if calculated != self.subtotal:
            raise ValueError(f"Subtotal mismatch: {calculated} vs {self.subtotal}")
        return calculated


@dataclass(frozen=True)
class DeliveryDetails:
    """Delivery snapshot copied at checkout; immutable thereafter."""
    name: str
    phone: str
    address: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class StatusChange:
    """One row of the append-only status audit log."""
    order_id: Optional[int]
    old_status: Optional[OrderStatus]
    new_status: OrderStatus
    changed_by: Optional[int]
    notes: Optional[str]
    changed_at: datetime


@dataclass(frozen=True)
class SellerNote:
    """Internal note a seller attaches to one of their orders."""
    order_id: int
    seller_id: int
    note: str
    created_by: int
    created_at: datetime
    id: Optional[int] = None


@dataclass
class Order:
    """
    Order aggregate root: one per (buyer, shop, checkout).

    Created only by settlement; mutated only through :meth:`apply_transition`.
    """
    order_number: OrderNumber
    buyer_id: int
    seller_id: int
    payment_reference: str
    delivery: DeliveryDetails
    total_amount: Money
    platform_fee: Money
    seller_amount: Money
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payout_status: PayoutStatus = PayoutStatus.PENDING
    payout_date: Optional[datetime] = None
    estimated_delivery_date: Optional[datetime] = None
    ready_for_pickup_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[int] = None

    @classmethod
    def create_paid(
        cls,
        buyer_id: int,
        seller_id: int,
        payment_reference: str,
        delivery: DeliveryDetails,
        items: List[OrderItem],
        split: FeeSplit,
        now: datetime,
        delivery_lead_time: timedelta,
    ) -> 'Order':
        """
        Materialize a paid order for one shop group.

        Raises:
            ValueError: If the items do not add up to the split total
        """
        order = cls(
            order_number=OrderNumber.generate(seller_id, now),
            buyer_id=buyer_id,
            seller_id=seller_id,
            payment_reference=payment_reference,
            delivery=delivery,
            total_amount=split.total,
            platform_fee=split.platform_fee,
            seller_amount=split.seller_amount,
            items=list(items),
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PAID,
            estimated_delivery_date=now + delivery_lead_time,
            created_at=now,
            updated_at=now,
        )
        order.validate_financials()
        return order

    def validate_financials(self) -> None:
        """
        Check the conservation equations.

        Raises:
            ValueError: If fee + seller amount != total, or items do not sum to total
        """
        if self.platform_fee + self.seller_amount != self.total_amount:
            raise ValueError(
                f"Financial validation failed: fee ({self.platform_fee}) + seller amount "
                f"({self.seller_amount}) != total ({self.total_amount})"
            )

        items_total = Money.zero(self.total_amount.currency)
        for item in self.items:
            items_total = items_total + item.calculate_total()
        if items_total != self.total_amount:
            raise ValueError(
                f"Financial validation failed: items sum to {items_total}, "
                f"order total is {self.total_amount}"
            )

    # =========================================================================
    # OWNERSHIP
    # =========================================================================

    def ensure_seller(self, seller_id: int) -> None:
        if self.seller_id != seller_id:
            raise AuthorizationError("Order does not belong to this seller")

    def ensure_buyer(self, buyer_id: int) -> None:
        if self.buyer_id != buyer_id:
            raise AuthorizationError("Order does not belong to this buyer")

    def is_visible_to(self, user_id: int, seller_id: Optional[int] = None) -> bool:
        return self.buyer_id == user_id or (
            seller_id is not None and self.seller_id == seller_id
        )

    # =========================================================================
    # STATUS WORKFLOW
    # =========================================================================

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in allowed_transitions(self.status)

    def apply_transition(
        self,
        new_status: OrderStatus,
        changed_by: Optional[int],
        now: datetime,
        payout_delay: timedelta,
        notes: Optional[str] = None,
    ) -> StatusChange:
        """
        Move to ``new_status`` if the workflow allows it.

        Stamps the milestone timestamp and, on delivery, schedules the payout.

        Raises:
            InvalidTransitionError: If the edge is not in the workflow table
        """
        if not self.can_transition_to(new_status):
            raise InvalidTransitionError(
                f'Cannot change status from "{self.status.value}" to "{new_status.value}". '
                f"Allowed transitions: {describe_allowed(self.status)}",
                current_status=self.status.value,
                allowed=[s.value for s in allowed_transitions(self.status)],
            )

        previous = self.status
        self.status = new_status
        self.updated_at = now

        milestone = milestone_field(new_status)
        if milestone:
            setattr(self, milestone, now)

        if new_status == OrderStatus.DELIVERED:
            self.payout_date = now + payout_delay
            self.payout_status = PayoutStatus.SCHEDULED

        return StatusChange(
            order_id=self.id,
            old_status=previous,
            new_status=new_status,
            changed_by=changed_by,
            notes=notes,
            changed_at=now,
        )

    def check_delivery_confirmable(self, buyer_id: int) -> None:
        """
        Buyer-side preconditions for confirming delivery.

        Raises:
            AuthorizationError: If the buyer does not own the order
            AlreadyDeliveredError: If the order is already delivered
            InvalidTransitionError: If the order is not in transit
        """
        self.ensure_buyer(buyer_id)
        if self.status == OrderStatus.DELIVERED:
            raise AlreadyDeliveredError("Order already marked as delivered")
        if self.status != OrderStatus.IN_TRANSIT:
            raise InvalidTransitionError(
                "Order must be in transit before confirming delivery",
                current_status=self.status.value,
                allowed=[s.value for s in allowed_transitions(self.status)],
            )
