from pydantic import Field
from pydantic_settings import BaseSettings


class PaystackSettings(BaseSettings):
    """
    Payment gateway settings.
    Loaded from .env file with exact variable name matching.
    """

    gateway: str = Field(default="paystack", alias="PAYMENT_GATEWAY")
    secret_key: str = Field(default="", alias="PAYSTACK_SECRET_KEY")
    base_url: str = Field(default="https://api.paystack.co", alias="PAYSTACK_BASE_URL")
    callback_url: str = Field(default="", alias="PAYSTACK_CALLBACK_URL")
    timeout_seconds: float = Field(default=15.0, gt=0, alias="PAYSTACK_TIMEOUT_SECONDS")
    max_retries: int = Field(default=2, ge=0, alias="PAYSTACK_MAX_RETRIES")
    retry_backoff_seconds: float = Field(default=0.5, ge=0, alias="PAYSTACK_RETRY_BACKOFF_SECONDS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }
