"""Unit tests for BillingService and StripeGateway webhook verification."""

import hashlib
import hmac
import json
import time
from unittest.mock import AsyncMock

import pytest

from src.ss_billing.application.service import BillingService
from src.ss_billing.domain.models import SubscriptionMirror
from src.ss_billing.infrastructure.stripe_gateway import StripeGateway
from src.ss_common.errors import (
    AlreadySubscribedError,
    BillingNotConfiguredError,
    NoSubscriptionError,
    WebhookSignatureError,
)

WEBHOOK_SECRET = "whsec_test_secret"


def _mirror(status: str = "active", customer: str | None = "cus_1") -> SubscriptionMirror:
    return SubscriptionMirror(
        id="m1",
        user_id="u1",
        stripe_customer_id=customer,
        stripe_subscription_id="sub_1",
        stripe_price_id="price_1",
        status=status,
        current_period_start=None,
        current_period_end=None,
        cancel_at_period_end=False,
    )


def _sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    ts = timestamp if timestamp is not None else int(time.time())
    signed = f"{ts}.{payload.decode()}".encode()
    sig = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


@pytest.fixture
def gateway() -> AsyncMock:
    gw = AsyncMock()
    gw.find_or_create_customer.return_value = "cus_1"
    gw.create_checkout_session.return_value = "https://checkout.stripe.test/c/1"
    gw.create_portal_session.return_value = "https://billing.stripe.test/p/1"
    return gw


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(gateway: AsyncMock, repo: AsyncMock) -> BillingService:
    return BillingService(
        gateway=gateway, repo=repo, price_id="price_1", base_url="https://app.test/"
    )


class TestCheckout:
    async def test_new_customer_gets_checkout_url(
        self, service: BillingService, gateway: AsyncMock, repo: AsyncMock
    ) -> None:
        repo.get_by_user_id.return_value = None

        resp = await service.create_checkout(AsyncMock(), "u1", "a@example.com")

        assert resp.url == "https://checkout.stripe.test/c/1"
        gateway.find_or_create_customer.assert_awaited_once_with("a@example.com", "u1")
        kwargs = gateway.create_checkout_session.await_args.kwargs
        assert kwargs["price_id"] == "price_1"
        assert kwargs["user_id"] == "u1"
        assert kwargs["success_url"].startswith("https://app.test/dashboard")

    @pytest.mark.parametrize("status", ["active", "trialing"])
    async def test_refused_when_already_subscribed(
        self, service: BillingService, gateway: AsyncMock, repo: AsyncMock, status: str
    ) -> None:
        repo.get_by_user_id.return_value = _mirror(status)
        with pytest.raises(AlreadySubscribedError):
            await service.create_checkout(AsyncMock(), "u1", "a@example.com")
        gateway.create_checkout_session.assert_not_awaited()

    async def test_canceled_user_may_resubscribe(
        self, service: BillingService, repo: AsyncMock
    ) -> None:
        repo.get_by_user_id.return_value = _mirror("canceled")
        resp = await service.create_checkout(AsyncMock(), "u1", "a@example.com")
        assert resp.url

    async def test_missing_price_id(self, gateway: AsyncMock, repo: AsyncMock) -> None:
        service = BillingService(gateway=gateway, repo=repo, price_id="", base_url="https://x")
        with pytest.raises(BillingNotConfiguredError):
            await service.create_checkout(AsyncMock(), "u1", "a@example.com")


class TestPortal:
    async def test_portal_url(
        self, service: BillingService, gateway: AsyncMock, repo: AsyncMock
    ) -> None:
        repo.get_by_user_id.return_value = _mirror()
        resp = await service.create_portal(AsyncMock(), "u1")
        assert resp.url == "https://billing.stripe.test/p/1"
        gateway.create_portal_session.assert_awaited_once_with(
            "cus_1", "https://app.test/dashboard"
        )

    @pytest.mark.parametrize("mirror", [None, _mirror(customer=None)])
    async def test_no_customer_raises(
        self, service: BillingService, repo: AsyncMock, mirror: SubscriptionMirror | None
    ) -> None:
        repo.get_by_user_id.return_value = mirror
        with pytest.raises(NoSubscriptionError):
            await service.create_portal(AsyncMock(), "u1")


class TestGetSubscription:
    async def test_none_without_mirror(self, service: BillingService, repo: AsyncMock) -> None:
        repo.get_by_user_id.return_value = None
        assert await service.get_subscription(AsyncMock(), "u1") is None

    async def test_mirror_projection(self, service: BillingService, repo: AsyncMock) -> None:
        repo.get_by_user_id.return_value = _mirror("past_due")
        resp = await service.get_subscription(AsyncMock(), "u1")
        assert resp is not None
        assert resp.status == "past_due"
        assert resp.current_period_end is None


class TestVerifyEvent:
    _PAYLOAD = json.dumps({"id": "evt_1", "type": "customer.created"}).encode()

    def test_valid_signature_decodes_event(self) -> None:
        gw = StripeGateway(api_key="", webhook_secret=WEBHOOK_SECRET)
        event = gw.verify_event(self._PAYLOAD, _sign(self._PAYLOAD))
        assert event["type"] == "customer.created"

    def test_wrong_secret_rejected(self) -> None:
        gw = StripeGateway(api_key="", webhook_secret=WEBHOOK_SECRET)
        with pytest.raises(WebhookSignatureError):
            gw.verify_event(self._PAYLOAD, _sign(self._PAYLOAD, secret="whsec_other"))

    def test_stale_timestamp_rejected(self) -> None:
        gw = StripeGateway(api_key="", webhook_secret=WEBHOOK_SECRET)
        stale = _sign(self._PAYLOAD, timestamp=int(time.time()) - 3600)
        with pytest.raises(WebhookSignatureError):
            gw.verify_event(self._PAYLOAD, stale)

    def test_tampered_payload_rejected(self) -> None:
        gw = StripeGateway(api_key="", webhook_secret=WEBHOOK_SECRET)
        header = _sign(self._PAYLOAD)
        with pytest.raises(WebhookSignatureError):
            gw.verify_event(self._PAYLOAD.replace(b"evt_1", b"evt_2"), header)

    def test_missing_secret_is_configuration_error(self) -> None:
        gw = StripeGateway(api_key="", webhook_secret="")
        with pytest.raises(BillingNotConfiguredError):
            gw.verify_event(self._PAYLOAD, _sign(self._PAYLOAD))

    def test_client_requires_api_key(self) -> None:
        with pytest.raises(BillingNotConfiguredError):
            _ = StripeGateway(api_key="", webhook_secret=WEBHOOK_SECRET).client
