"""
Tests for the Paystack gateway adapter.

A local aiohttp server stands in for the Paystack REST API.
"""
import asyncio
import hashlib
import hmac
import json

import pytest
from aiohttp import test_utils, web

from tradepost.domain.exceptions import PaymentInitializationError, PaymentVerificationError
from tradepost.infrastructure.adapters.payments import (
    FakeGateway,
    PaystackGateway,
    get_gateway,
    reset_gateway,
    set_gateway,
)
from tradepost.settings import get_app_settings
from tradepost.settings.modules.payment_settings import PaystackSettings

SECRET = "sk_test_local"


def make_gateway(server: test_utils.TestServer, **overrides) -> PaystackGateway:
    options = {
        "secret_key": SECRET,
        "base_url": str(server.make_url("/")),
        "timeout_seconds": 2.0,
        "max_retries": 2,
        "retry_backoff_seconds": 0,
    }
    options.update(overrides)
    return PaystackGateway(PaystackSettings(**options))


def verify_payload(reference: str, metadata) -> dict:
    return {
        "status": True,
        "message": "Verification successful",
        "data": {
            "reference": reference,
            "status": "success",
            "amount": 900000,
            "currency": "NGN",
            "gateway_response": "Approved",
            "metadata": metadata,
        },
    }


@pytest.mark.asyncio
async def test_create_session_posts_kobo_and_metadata():
    """Test that initialize sends the amount in kobo with the intent as metadata."""
    received = {}

    async def initialize(request: web.Request) -> web.Response:
        received["auth"] = request.headers.get("Authorization")
        received["body"] = await request.json()
        return web.json_response({
            "status": True,
            "data": {
                "authorization_url": "https://checkout.paystack.com/abc",
                "access_code": "abc",
                "reference": received["body"]["reference"],
            },
        })

    app = web.Application()
    app.router.add_post("/transaction/initialize", initialize)

    async with test_utils.TestServer(app) as server:
        gateway = make_gateway(server)
        session = await gateway.create_session(
            amount_minor=900000,
            reference="TP-1",
            email="ada@example.com",
            metadata={"user_id": 1, "currency": "NGN"},
        )

    assert session.session_url == "https://checkout.paystack.com/abc"
    assert session.access_code == "abc"
    assert session.reference == "TP-1"
    assert received["auth"] == f"Bearer {SECRET}"
    assert received["body"]["amount"] == 900000
    assert received["body"]["metadata"] == {"user_id": 1, "currency": "NGN"}


@pytest.mark.asyncio
async def test_create_session_rejected():
    async def initialize(request: web.Request) -> web.Response:
        return web.json_response({"status": False, "message": "Invalid key"}, status=401)

    app = web.Application()
    app.router.add_post("/transaction/initialize", initialize)

    async with test_utils.TestServer(app) as server:
        with pytest.raises(PaymentInitializationError):
            await make_gateway(server).create_session(500000, "TP-2", "ada@example.com", {})


@pytest.mark.asyncio
async def test_verify_decodes_string_metadata():
    """Test that metadata sent back as a JSON string is decoded."""
    metadata = {"user_id": 1, "orders": []}

    async def verify(request: web.Request) -> web.Response:
        reference = request.match_info["reference"]
        return web.json_response(verify_payload(reference, json.dumps(metadata)))

    app = web.Application()
    app.router.add_get("/transaction/verify/{reference}", verify)

    async with test_utils.TestServer(app) as server:
        result = await make_gateway(server).verify("TP-3")

    assert result.is_successful
    assert result.reference == "TP-3"
    assert result.amount_minor == 900000
    assert result.metadata == metadata
    assert result.gateway_response == "Approved"


@pytest.mark.asyncio
async def test_verify_unknown_reference_is_not_retried():
    calls = []

    async def verify(request: web.Request) -> web.Response:
        calls.append(request.match_info["reference"])
        return web.json_response({"status": False, "message": "Transaction reference not found"}, status=400)

    app = web.Application()
    app.router.add_get("/transaction/verify/{reference}", verify)

    async with test_utils.TestServer(app) as server:
        with pytest.raises(PaymentVerificationError, match="verification failed"):
            await make_gateway(server).verify("TP-missing")

    assert calls == ["TP-missing"]


@pytest.mark.asyncio
async def test_verify_retries_server_errors():
    """Test that a 5xx is retried and a later success is returned."""
    calls = []

    async def verify(request: web.Request) -> web.Response:
        calls.append(1)
        if len(calls) == 1:
            return web.json_response({"status": False, "message": "upstream"}, status=502)
        return web.json_response(verify_payload("TP-4", {}))

    app = web.Application()
    app.router.add_get("/transaction/verify/{reference}", verify)

    async with test_utils.TestServer(app) as server:
        result = await make_gateway(server).verify("TP-4")

    assert result.is_successful
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_verify_gives_up_after_timeouts():
    calls = []

    async def verify(request: web.Request) -> web.Response:
        calls.append(1)
        await asyncio.sleep(0.5)
        return web.json_response(verify_payload("TP-5", {}))

    app = web.Application()
    app.router.add_get("/transaction/verify/{reference}", verify)

    async with test_utils.TestServer(app) as server:
        gateway = make_gateway(server, timeout_seconds=0.1, max_retries=1)
        with pytest.raises(PaymentVerificationError, match="retry verification"):
            await gateway.verify("TP-5")

    assert len(calls) == 2


def test_webhook_signature():
    gateway = PaystackGateway(PaystackSettings(secret_key=SECRET))
    body = b'{"event":"charge.success","data":{"reference":"TP-6"}}'
    signature = hmac.new(SECRET.encode(), body, hashlib.sha512).hexdigest()

    assert gateway.verify_signature(body, signature)
    assert not gateway.verify_signature(body + b" ", signature)
    assert not gateway.verify_signature(body, None)


def test_gateway_factory(monkeypatch):
    """Test that PAYMENT_GATEWAY selects the adapter and set_gateway overrides it."""
    monkeypatch.setenv("PAYMENT_GATEWAY", "fake")
    get_app_settings.cache_clear()
    reset_gateway()
    try:
        gateway = get_gateway()
        assert isinstance(gateway, FakeGateway)
        assert get_gateway() is gateway

        replacement = FakeGateway(secret_key="other")
        set_gateway(replacement)
        assert get_gateway() is replacement

        monkeypatch.setenv("PAYMENT_GATEWAY", "paystack")
        get_app_settings.cache_clear()
        reset_gateway()
        assert isinstance(get_gateway(), PaystackGateway)
    finally:
        reset_gateway()
        get_app_settings.cache_clear()
