"""Configurable in-memory payment gateway for development and testing.

This adapter simulates the hosted checkout flow without any external calls:
sessions are remembered in memory and ``complete()`` plays the part of the
buyer paying on the hosted page.
"""
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import uuid4
import copy
import hashlib
import hmac
import logging

from tradepost.application.interfaces import IPaymentGateway, PaymentSession, PaymentVerification
from tradepost.domain.exceptions import PaymentInitializationError, PaymentVerificationError


logger = logging.getLogger(__name__)

VerifyHook = Callable[[str], Awaitable[None]]


class FakeGateway(IPaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret_key: str = "test-secret") -> None:
        self.secret_key = secret_key
        self.sessions: Dict[str, Dict[str, Any]] = {}
        self.calls: list = []
        self.fail_create: bool = False
        self.fail_verify: bool = False
        self.on_verify: Optional[VerifyHook] = None

    def configure(self, fail_create: bool = False, fail_verify: bool = False) -> None:
        """Configure gateway behavior at runtime."""
        self.fail_create = fail_create
        self.fail_verify = fail_verify

    def complete(
        self,
        reference: str,
        status: str = "success",
        amount_minor: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Simulate the buyer finishing (or abandoning) the hosted payment."""
        session = self.sessions[reference]
        session["status"] = status
        if amount_minor is not None:
            session["amount_minor"] = amount_minor
        if metadata is not None:
            session["metadata"] = metadata

    def register(
        self, reference: str, amount_minor: int, metadata: Dict[str, Any], status: str = "success"
    ) -> None:
        """Seed a transaction that never went through ``create_session``."""
        self.sessions[reference] = {
            "amount_minor": amount_minor,
            "email": None,
            "metadata": copy.deepcopy(metadata),
            "status": status,
        }

    async def create_session(
        self,
        amount_minor: int,
        reference: str,
        email: str,
        metadata: Dict[str, Any],
    ) -> PaymentSession:
        self.calls.append(
            {
                "method": "create_session",
                "amount_minor": amount_minor,
                "reference": reference,
                "email": email,
                "metadata": metadata,
            }
        )
        if self.fail_create:
            raise PaymentInitializationError("Failed to initialize payment")

        self.sessions[reference] = {
            "amount_minor": amount_minor,
            "email": email,
            "metadata": copy.deepcopy(metadata),
            "status": "abandoned",
        }
        access_code = uuid4().hex[:12]
        logger.info(f"FakeGateway session {reference} opened for {amount_minor} minor units")
        return PaymentSession(
            session_url=f"https://checkout.fake/{access_code}",
            reference=reference,
            access_code=access_code,
        )

    async def verify(self, reference: str) -> PaymentVerification:
        self.calls.append({"method": "verify", "reference": reference})
        if self.on_verify is not None:
            await self.on_verify(reference)
        if self.fail_verify:
            raise PaymentVerificationError("Payment gateway unavailable, please retry verification")

        session = self.sessions.get(reference)
        if session is None:
            raise PaymentVerificationError("Payment verification failed")

        return PaymentVerification(
            reference=reference,
            status=session["status"],
            amount_minor=session["amount_minor"],
            currency=session["metadata"].get("currency", "NGN"),
            metadata=copy.deepcopy(session["metadata"]),
        )

    def verify_signature(self, payload: bytes, signature: Optional[str]) -> bool:
        if not signature:
            return False
        return hmac.compare_digest(self.sign(payload), signature)

    def sign(self, payload: bytes) -> str:
        """Signature a real gateway would put in the webhook header."""
        return hmac.new(self.secret_key.encode("utf-8"), payload, hashlib.sha512).hexdigest()

    def verify_count(self) -> int:
        return sum(1 for call in self.calls if call["method"] == "verify")
