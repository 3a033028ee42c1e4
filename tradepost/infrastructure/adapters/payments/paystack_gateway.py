"""
Paystack Payment Gateway Implementation.

Opens hosted checkout sessions and verifies transactions over the
Paystack REST API.
"""
from typing import Any, Dict, Optional
from urllib.parse import quote
import asyncio
import hashlib
import hmac
import json
import logging

import aiohttp

from tradepost.application.interfaces import IPaymentGateway, PaymentSession, PaymentVerification
from tradepost.domain.exceptions import PaymentInitializationError, PaymentVerificationError
from tradepost.settings.modules.payment_settings import PaystackSettings


logger = logging.getLogger(__name__)


class PaystackGateway(IPaymentGateway):
    """
    Paystack implementation of the payment gateway.

    Amounts cross the wire in kobo. The checkout intent rides along as
    transaction metadata and comes back verbatim on verify.
    """

    def __init__(self, settings: PaystackSettings):
        """
        Initialize Paystack gateway.

        Args:
            settings: Paystack settings with secret key and base URL
        """
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        logger.info(f"PaystackGateway initialized ({self.base_url})")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.secret_key}",
            "Content-Type": "application/json",
        }

    async def create_session(
        self,
        amount_minor: int,
        reference: str,
        email: str,
        metadata: Dict[str, Any],
    ) -> PaymentSession:
        """Initialize a Paystack transaction (single attempt)."""
        payload = {
            "email": email,
            "amount": amount_minor,
            "reference": reference,
            "metadata": metadata,
            "currency": metadata.get("currency", "NGN"),
        }
        if self.settings.callback_url:
            payload["callback_url"] = self.settings.callback_url

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    f"{self.base_url}/transaction/initialize",
                    json=payload,
                    headers=self._headers(),
                ) as response:
                    body = await self._read_json(response)
                    if response.status >= 400 or not body.get("status"):
                        logger.error(
                            f"Paystack initialize failed for {reference}: "
                            f"{response.status} - {body.get('message')}"
                        )
                        raise PaymentInitializationError("Failed to initialize payment")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Paystack initialize unreachable for {reference}: {e!r}")
            raise PaymentInitializationError("Payment gateway unavailable") from e

        data = body.get("data") or {}
        if not data.get("authorization_url"):
            raise PaymentInitializationError("Gateway returned no authorization URL")

        return PaymentSession(
            session_url=data["authorization_url"],
            reference=data.get("reference", reference),
            access_code=data.get("access_code"),
        )

    async def verify(self, reference: str) -> PaymentVerification:
        """Verify a transaction, retrying transport failures with backoff."""
        url = f"{self.base_url}/transaction/verify/{quote(reference, safe='')}"
        attempts = self.settings.max_retries + 1
        last_error: Optional[BaseException] = None

        for attempt in range(attempts):
            if attempt:
                await asyncio.sleep(self.settings.retry_backoff_seconds * (2 ** (attempt - 1)))
            try:
                async with aiohttp.ClientSession(timeout=self.timeout) as session:
                    async with session.get(url, headers=self._headers()) as response:
                        body = await self._read_json(response)
                        if response.status >= 500:
                            last_error = PaymentVerificationError(
                                f"Gateway error {response.status}"
                            )
                            logger.warning(
                                f"Paystack verify {reference} attempt {attempt + 1}/{attempts}: "
                                f"HTTP {response.status}"
                            )
                            continue
                        if response.status >= 400 or not body.get("status"):
                            logger.info(
                                f"Paystack rejected verify for {reference}: "
                                f"{response.status} - {body.get('message')}"
                            )
                            raise PaymentVerificationError("Payment verification failed")
                        return self._parse_verification(reference, body.get("data") or {})
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = e
                logger.warning(
                    f"Paystack verify {reference} attempt {attempt + 1}/{attempts} failed: {e!r}"
                )

        raise PaymentVerificationError(
            "Payment gateway unavailable, please retry verification"
        ) from last_error

    def verify_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        """HMAC-SHA512 of the raw body keyed by the secret key."""
        if not signature or not self.settings.secret_key:
            return False
        expected = hmac.new(
            self.settings.secret_key.encode("utf-8"), payload, hashlib.sha512
        ).hexdigest()
        return hmac.compare_digest(expected, signature)

    @staticmethod
    async def _read_json(response: aiohttp.ClientResponse) -> Dict[str, Any]:
        try:
            body = await response.json(content_type=None)
        except (json.JSONDecodeError, aiohttp.ContentTypeError):
            return {}
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _parse_verification(reference: str, data: Dict[str, Any]) -> PaymentVerification:
        metadata = data.get("metadata") or {}
        if isinstance(metadata, str):
            try:
                metadata = json.loads(metadata)
            except json.JSONDecodeError:
                metadata = {}
        if not isinstance(metadata, dict):
            metadata = {}

        try:
            amount_minor = int(data.get("amount") or 0)
        except (TypeError, ValueError):
            amount_minor = 0

        return PaymentVerification(
            reference=data.get("reference", reference),
            status=str(data.get("status", "")),
            amount_minor=amount_minor,
            currency=data.get("currency") or "NGN",
            metadata=metadata,
            gateway_response=data.get("gateway_response"),
        )
