"""Endpoint tests through the ASGI app with mocked sessions and services."""

import hashlib
import hmac
import json
import time
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

import src.ss_billing.api.router as billing_router
import src.ss_gateway.auth.dependencies as auth_deps
from src.ss_billing.domain.models import WebhookOutcome
from src.ss_billing.infrastructure.stripe_gateway import StripeGateway
from src.ss_gateway.user.db_models import UserModel

WEBHOOK_SECRET = "whsec_route_test"

_CALC_BODY = {
    "ticket_price": 25,
    "tickets_sold": 200,
    "tax_rate": 10,
    "total_expenses": 500,
    "deal_type": "guarantee",
    "guarantee": 1000,
}


def _signed(payload: bytes, timestamp: int | None = None) -> str:
    ts = timestamp if timestamp is not None else int(time.time())
    sig = hmac.new(
        WEBHOOK_SECRET.encode(), f"{ts}.{payload.decode()}".encode(), hashlib.sha256
    ).hexdigest()
    return f"t={ts},v1={sig}"


@pytest.fixture
def reconciler(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    mock = AsyncMock()
    mock.handle.return_value = WebhookOutcome.APPLIED
    monkeypatch.setattr(billing_router, "_reconciler", mock)
    monkeypatch.setattr(
        billing_router, "_gateway", StripeGateway(api_key="", webhook_secret=WEBHOOK_SECRET)
    )
    return mock


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


class TestCalculate:
    async def test_requires_login(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/settlements/calculate", json=_CALC_BODY)
        assert resp.status_code == 401

    async def test_returns_breakdown(self, client: AsyncClient, api_overrides: None) -> None:
        resp = await client.post("/api/v1/settlements/calculate", json=_CALC_BODY)
        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["venue_payout"] == pytest.approx(3000)
        assert body["data"]["venue_payout_display"] == "$3,000.00"
        assert body["request_id"].startswith("req_")

    async def test_validation_message_in_envelope(
        self, client: AsyncClient, api_overrides: None
    ) -> None:
        resp = await client.post(
            "/api/v1/settlements/calculate", json=_CALC_BODY | {"ticket_price": 0}
        )
        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 2001
        assert body["message"] == "Please enter valid ticket price and tickets sold."
        assert body["data"] is None

    async def test_overflowing_amounts_rejected(
        self, client: AsyncClient, api_overrides: None
    ) -> None:
        resp = await client.post(
            "/api/v1/settlements/calculate",
            json=_CALC_BODY | {"ticket_price": 1e308, "tickets_sold": 10},
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 2001
        assert resp.json()["data"] is None


class TestPaywall:
    async def test_saving_without_entitlement_is_refused(
        self, client: AsyncClient, api_overrides: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        entitlements = AsyncMock()
        entitlements.has_access.return_value = False
        monkeypatch.setattr(auth_deps, "_entitlements", entitlements)

        resp = await client.post("/api/v1/shows", json={"inputs": _CALC_BODY})

        assert resp.status_code == 403
        assert resp.json()["code"] == 5001

    async def test_share_management_without_entitlement_is_refused(
        self, client: AsyncClient, api_overrides: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        entitlements = AsyncMock()
        entitlements.has_access.return_value = False
        monkeypatch.setattr(auth_deps, "_entitlements", entitlements)

        resp = await client.post("/api/v1/share-links", json={"show_id": "s1"})

        assert resp.status_code == 403


class TestAdmin:
    async def test_non_admin_refused(self, client: AsyncClient, api_overrides: None) -> None:
        resp = await client.post(
            "/api/v1/admin/entitlements",
            json={"user_id": "0b7e0a8e-2f0c-4d55-9a0f-3c4c0d0e1a11"},
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 1006


class TestStripeWebhook:
    _PAYLOAD = json.dumps(
        {"id": "evt_1", "type": "customer.subscription.deleted", "data": {"object": {"id": "sub_1"}}}
    ).encode()

    async def test_missing_signature_header(
        self, client: AsyncClient, api_overrides: None, reconciler: AsyncMock
    ) -> None:
        resp = await client.post("/api/v1/webhooks/stripe", content=self._PAYLOAD)
        assert resp.status_code == 400
        assert resp.json()["code"] == 5004
        reconciler.handle.assert_not_awaited()

    async def test_bad_signature_has_no_side_effects(
        self, client: AsyncClient, api_overrides: None, reconciler: AsyncMock
    ) -> None:
        resp = await client.post(
            "/api/v1/webhooks/stripe",
            content=self._PAYLOAD,
            headers={"Stripe-Signature": "t=1,v1=deadbeef"},
        )
        assert resp.status_code == 400
        reconciler.handle.assert_not_awaited()

    async def test_replayed_old_event_rejected(
        self, client: AsyncClient, api_overrides: None, reconciler: AsyncMock
    ) -> None:
        week_ago = int(time.time()) - 7 * 24 * 3600
        resp = await client.post(
            "/api/v1/webhooks/stripe",
            content=self._PAYLOAD,
            headers={"Stripe-Signature": _signed(self._PAYLOAD, timestamp=week_ago)},
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 5004
        reconciler.handle.assert_not_awaited()

    async def test_valid_event_is_acknowledged(
        self, client: AsyncClient, api_overrides: None,
        reconciler: AsyncMock, mock_session: AsyncMock,
    ) -> None:
        resp = await client.post(
            "/api/v1/webhooks/stripe",
            content=self._PAYLOAD,
            headers={"Stripe-Signature": _signed(self._PAYLOAD)},
        )
        assert resp.status_code == 200
        assert resp.json() == {"received": True}
        event = reconciler.handle.await_args.args[1]
        assert event["id"] == "evt_1"
        assert reconciler.handle.await_args.args[0] is mock_session

    async def test_failure_acknowledged_by_default(
        self, client: AsyncClient, api_overrides: None, reconciler: AsyncMock
    ) -> None:
        reconciler.handle.return_value = WebhookOutcome.FAILED
        resp = await client.post(
            "/api/v1/webhooks/stripe",
            content=self._PAYLOAD,
            headers={"Stripe-Signature": _signed(self._PAYLOAD)},
        )
        assert resp.status_code == 200

    async def test_failure_surfaces_when_ack_disabled(
        self, client: AsyncClient, api_overrides: None,
        reconciler: AsyncMock, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        reconciler.handle.return_value = WebhookOutcome.FAILED
        monkeypatch.setattr(
            billing_router,
            "settings",
            billing_router.settings.model_copy(update={"WEBHOOK_ACK_ON_FAILURE": False}),
        )
        resp = await client.post(
            "/api/v1/webhooks/stripe",
            content=self._PAYLOAD,
            headers={"Stripe-Signature": _signed(self._PAYLOAD)},
        )
        assert resp.status_code == 500


class TestEntitlementMe:
    async def test_reports_access(
        self, client: AsyncClient, api_overrides: None,
        current_user: UserModel, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        import src.ss_entitlement.api.router as ent_router
        from src.ss_entitlement.application.schemas import EntitlementDetailsResponse

        service = AsyncMock()
        service.get_details.return_value = EntitlementDetailsResponse(
            has_access=False, entitlement=None
        )
        monkeypatch.setattr(ent_router, "_service", service)

        resp = await client.get("/api/v1/entitlements/me")

        assert resp.status_code == 200
        assert resp.json()["data"] == {"has_access": False, "entitlement": None}
        assert service.get_details.await_args.args[1] == str(current_user.id)
