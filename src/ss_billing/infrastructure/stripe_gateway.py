"""StripeGateway — thin async wrapper over the Stripe SDK.

Every SDK failure is logged and re-raised as ExternalServiceError so callers
deal with one error type. Objects coming back from the SDK are turned into
plain dicts before parsing.
"""

import json
import logging
from typing import Any

import stripe

from config.settings import settings
from src.ss_billing.domain.models import SubscriptionSnapshot
from src.ss_billing.domain.stripe_objects import parse_subscription
from src.ss_common.errors import (
    BillingNotConfiguredError,
    ExternalServiceError,
    WebhookSignatureError,
)

logger = logging.getLogger(__name__)


def _plain(obj: Any) -> dict[str, Any]:
    # A StripeObject's string form is its JSON body
    return json.loads(str(obj))


class StripeGateway:
    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
    ) -> None:
        self._api_key = settings.STRIPE_SECRET_KEY if api_key is None else api_key
        self._webhook_secret = (
            settings.STRIPE_WEBHOOK_SECRET if webhook_secret is None else webhook_secret
        )
        self._client: stripe.StripeClient | None = None

    @property
    def client(self) -> stripe.StripeClient:
        if not self._api_key:
            raise BillingNotConfiguredError("STRIPE_SECRET_KEY")
        if self._client is None:
            self._client = stripe.StripeClient(
                self._api_key, http_client=stripe.HTTPXClient()
            )
        return self._client

    def verify_event(self, payload: bytes, signature: str) -> dict[str, Any]:
        """Check the Stripe-Signature header and decode the event body."""
        if not self._webhook_secret:
            raise BillingNotConfiguredError("STRIPE_WEBHOOK_SECRET")
        body = payload.decode("utf-8")
        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                self._webhook_secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except stripe.SignatureVerificationError:
            raise WebhookSignatureError() from None
        try:
            event = json.loads(body)
        except ValueError:
            raise WebhookSignatureError("Invalid payload") from None
        if not isinstance(event, dict) or "type" not in event:
            raise WebhookSignatureError("Invalid payload")
        return event

    async def retrieve_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        try:
            sub = await self.client.v1.subscriptions.retrieve_async(subscription_id)
        except stripe.StripeError:
            logger.exception("Stripe subscription retrieve failed: %s", subscription_id)
            raise ExternalServiceError("Payment provider") from None
        return parse_subscription(_plain(sub))

    async def find_or_create_customer(self, email: str, user_id: str) -> str:
        try:
            existing = await self.client.v1.customers.list_async(
                params={"email": email, "limit": 1}
            )
            customers = _plain(existing).get("data") or []
            if customers:
                return customers[0]["id"]
            created = await self.client.v1.customers.create_async(
                params={"email": email, "metadata": {"user_id": user_id}}
            )
        except stripe.StripeError:
            logger.exception("Stripe customer lookup/create failed for user %s", user_id)
            raise ExternalServiceError("Payment provider") from None
        return _plain(created)["id"]

    async def create_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        user_id: str,
    ) -> str:
        try:
            session = await self.client.v1.checkout.sessions.create_async(
                params={
                    "customer": customer_id,
                    "mode": "subscription",
                    "line_items": [{"price": price_id, "quantity": 1}],
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                    "allow_promotion_codes": True,
                    "metadata": {"user_id": user_id},
                    "subscription_data": {"metadata": {"user_id": user_id}},
                }
            )
        except stripe.StripeError:
            logger.exception("Stripe checkout session failed for user %s", user_id)
            raise ExternalServiceError("Payment provider") from None
        return _plain(session)["url"]

    async def create_portal_session(self, customer_id: str, return_url: str) -> str:
        try:
            session = await self.client.v1.billing_portal.sessions.create_async(
                params={"customer": customer_id, "return_url": return_url}
            )
        except stripe.StripeError:
            logger.exception("Stripe portal session failed for customer %s", customer_id)
            raise ExternalServiceError("Payment provider") from None
        return _plain(session)["url"]
