"""Application layer interfaces."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PaymentSession:
    """Hosted payment page handed back to the buyer."""
    session_url: str
    reference: str
    access_code: Optional[str] = None


@dataclass(frozen=True)
class PaymentVerification:
    """
    Gateway answer for a reference.

    ``amount_minor`` is in the currency's smallest unit (kobo for NGN).
    ``metadata`` is the checkout intent exactly as the gateway echoed it.
    """
    reference: str
    status: str
    amount_minor: int
    currency: str = "NGN"
    metadata: Dict[str, Any] = field(default_factory=dict)
    gateway_response: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class OrderStatusNotification:
    """Payload for a buyer-facing order status notification."""
    order_id: int
    order_number: str
    status: str
    buyer_email: Optional[str]
    buyer_name: Optional[str]
    shop_name: Optional[str]
    changed_by: Optional[int] = None
    notes: Optional[str] = None


class IPaymentGateway(ABC):
    """
    Interface for the external payment gateway.

    This interface defines the contract for hosted checkout, allowing the
    application layer to take payments without depending on a specific
    provider.
    """

    @abstractmethod
    async def create_session(
        self,
        amount_minor: int,
        reference: str,
        email: str,
        metadata: Dict[str, Any],
    ) -> PaymentSession:
        """
        Open a hosted payment session.

        Args:
            amount_minor: Amount to charge in minor units
            reference: Checkout payment reference
            email: Buyer email
            metadata: Serialized checkout intent, echoed back on verify

        Returns:
            PaymentSession with the hosted page URL

        Raises:
            PaymentInitializationError: If the gateway refuses or is unreachable
        """
        pass

    @abstractmethod
    async def verify(self, reference: str) -> PaymentVerification:
        """
        Ask the gateway about a reference.

        Args:
            reference: Checkout payment reference

        Returns:
            PaymentVerification (status may be anything the gateway reports)

        Raises:
            PaymentVerificationError: If the reference is unknown or the
                gateway cannot be reached
        """
        pass

    @abstractmethod
    def verify_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        """Check a webhook body against the gateway signature header."""
        pass


class INotificationService(ABC):
    """
    Interface for notification service operations.

    This interface defines the contract for sending notifications,
    allowing different implementations (email, Slack, webhook, etc.)
    """

    @abstractmethod
    async def send_order_status_update(self, notification: OrderStatusNotification) -> None:
        """
        Tell the buyer their order moved to a notifiable status.

        Args:
            notification: Order, buyer and status details
        """
        pass

    @abstractmethod
    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        pass


__all__ = [
    "INotificationService",
    "IPaymentGateway",
    "OrderStatusNotification",
    "PaymentSession",
    "PaymentVerification",
]
