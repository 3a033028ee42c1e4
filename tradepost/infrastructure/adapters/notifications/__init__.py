"""Notification service adapters."""
from tradepost.application.interfaces import INotificationService
from tradepost.settings import get_app_settings

from .mock_notification_service import MockNotificationService
from .slack_notification_service import SlackNotificationService


def build_notification_service() -> INotificationService:
    """Slack when enabled in settings, otherwise the logging mock."""
    slack = get_app_settings().slack
    if slack.enabled:
        return SlackNotificationService(slack)
    return MockNotificationService()


__all__ = ["MockNotificationService", "SlackNotificationService", "build_notification_service"]
