"""
Order status workflow.

The legal transitions live in one literal table. Both the legality check
and the "allowed transitions" wording of error messages are derived from it.
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from ..exceptions import ValidationError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    READY_FOR_PICKUP = "ready_for_pickup"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    # Terminal and unreachable until refunds are integrated.
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        """Parse a status name, raising ValidationError for unknown values."""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(status.value for status in cls)
            raise ValidationError(f"Invalid status. Valid statuses: {valid}")


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


STATUS_WORKFLOW: Dict[OrderStatus, Tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PROCESSING,),
    OrderStatus.PROCESSING: (OrderStatus.READY_FOR_PICKUP,),
    OrderStatus.READY_FOR_PICKUP: (OrderStatus.IN_TRANSIT,),
    OrderStatus.IN_TRANSIT: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

# Statuses whose arrival is announced to the buyer.
NOTIFIABLE_STATUSES: FrozenSet[OrderStatus] = frozenset({
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.IN_TRANSIT,
    OrderStatus.DELIVERED,
})

# Order attribute stamped when a status is entered.
MILESTONE_FIELDS: Dict[OrderStatus, str] = {
    OrderStatus.READY_FOR_PICKUP: "ready_for_pickup_at",
    OrderStatus.IN_TRANSIT: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
}


def allowed_transitions(status: OrderStatus) -> Tuple[OrderStatus, ...]:
    return STATUS_WORKFLOW.get(status, ())


def is_terminal(status: OrderStatus) -> bool:
    return not allowed_transitions(status)


def describe_allowed(status: OrderStatus) -> str:
    """Human-readable list of legal next states, or ``none (terminal state)``."""
    if is_terminal(status):
        return "none (terminal state)"
    return ", ".join(s.value for s in allowed_transitions(status))


def milestone_field(status: OrderStatus) -> Optional[str]:
    return MILESTONE_FIELDS.get(status)
