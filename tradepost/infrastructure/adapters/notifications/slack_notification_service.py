"""
Slack Notification Service Implementation.

Sends order status notifications via Slack Webhook API.
"""
import logging

import aiohttp

from tradepost.application.interfaces import INotificationService, OrderStatusNotification
from tradepost.settings.modules.integrations_settings import SlackSettings


logger = logging.getLogger(__name__)

STATUS_HEADLINES = {
    "ready_for_pickup": "📦 *Ready for pickup*",
    "in_transit": "🚚 *In transit*",
    "delivered": "✅ *Delivered*",
}


class SlackNotificationService(INotificationService):
    """
    Slack implementation of notification service.

    Sends notifications via Slack Webhook API.
    """

    def __init__(self, settings: SlackSettings):
        """
        Initialize Slack notification service.

        Args:
            settings: Slack settings with webhook URL
        """
        self.settings = settings
        self.webhook_url = settings.webhook_url
        self.prefix = settings.prefix
        logger.info("SlackNotificationService initialized")

    async def send_order_status_update(self, notification: OrderStatusNotification) -> None:
        """Send a buyer status notification via Slack."""
        headline = STATUS_HEADLINES.get(notification.status, f"*{notification.status}*")
        text = (
            f"{self.prefix} {headline}\n"
            f"Order: `{notification.order_number}`\n"
            f"Shop: {notification.shop_name or '-'}\n"
            f"Buyer: {notification.buyer_name or '-'} <{notification.buyer_email or '-'}>"
        )
        if notification.notes:
            text += f"\nNotes: {notification.notes}"
        await self._send_message(text, color="good")

    async def notify(self, message: str, severity: int = 50) -> None:
        """
        Send a generic notification message.

        Args:
            message: Notification message
            severity: Severity level (0-100, higher = more critical)
        """
        color = "danger" if severity >= 80 else "warning" if severity >= 50 else "good"
        await self._send_message(f"{self.prefix} {message}", color=color)

    async def _send_message(self, text: str, color: str = "good") -> None:
        """
        Send message to Slack.

        Args:
            text: Message text
            color: Attachment color (good, warning, danger)
        """
        if not self.webhook_url:
            logger.warning("Slack webhook_url not configured, skipping notification")
            return

        try:
            async with aiohttp.ClientSession() as session:
                payload = {
                    "attachments": [
                        {
                            "color": color,
                            "text": text,
                            "mrkdwn_in": ["text"],
                        }
                    ]
                }

                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(
                            f"Slack API error: {response.status} - {error_text}"
                        )
                    else:
                        logger.info("Slack notification sent successfully")
        except Exception as e:
            logger.error(f"Failed to send Slack notification: {e}", exc_info=True)
