"""
Mock Notification Service Implementation.

This simulates notifications for testing and demos.
"""
import logging

from tradepost.application.interfaces import INotificationService, OrderStatusNotification


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """
    Mock implementation of notification service.

    Logs notifications instead of actually sending them.
    Useful for testing and demos.
    """

    def __init__(self, fail: bool = False):
        """Initialize mock notification service.

        Args:
            fail: Raise on every send (exercises best-effort delivery)
        """
        self.notifications_sent = []
        self.fail = fail
        logger.info("MockNotificationService initialized (console logging)")

    async def send_order_status_update(self, notification: OrderStatusNotification) -> None:
        """
        Simulate a buyer status notification.

        Args:
            notification: Order, buyer and status details
        """
        if self.fail:
            raise RuntimeError("Notification channel unavailable")

        self.notifications_sent.append(
            {
                "type": "order_status",
                "order_id": notification.order_id,
                "order_number": notification.order_number,
                "status": notification.status,
                "buyer_email": notification.buyer_email,
                "shop_name": notification.shop_name,
            }
        )

        logger.info(
            f"🔔 ORDER STATUS NOTIFICATION:\n"
            f"   Order: {notification.order_number}\n"
            f"   Status: {notification.status}\n"
            f"   Buyer: {notification.buyer_email}"
        )

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        if self.fail:
            raise RuntimeError("Notification channel unavailable")

        self.notifications_sent.append(
            {"type": "generic", "message": message, "severity": severity}
        )

        severity_emoji = "🔴" if severity >= 80 else "🟡" if severity >= 50 else "🟢"
        logger.info(f"{severity_emoji} 🔔 NOTIFICATION (severity={severity}):\n   {message}")

    def get_notifications(self) -> list:
        """Get all sent notifications (for testing)."""
        return self.notifications_sent

    def clear(self) -> None:
        """Clear notifications (for testing)."""
        self.notifications_sent.clear()
