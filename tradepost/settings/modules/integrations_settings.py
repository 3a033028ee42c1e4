from pydantic import Field
from pydantic_settings import BaseSettings


class SlackSettings(BaseSettings):
    """
    Slack integration settings for order status notifications.
    Loaded from .env file with exact variable name matching.
    """

    enabled: bool = Field(default=False, alias="TRADEPOST_SLACK_ENABLED")
    webhook_url: str = Field(default="", alias="SLACK_WEBHOOK_URL")
    prefix: str = Field(default="[TRADEPOST]", alias="TRADEPOST_SLACK_PREFIX")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }
