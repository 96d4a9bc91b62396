"""WebhookReconciler — folds Stripe lifecycle events into local state.

Each handler is idempotent: replaying an event it already applied is a
logged no-op. Mirror and entitlement writes for one event share a single
transaction. Failures are rolled back, logged, and reported as FAILED; the
router decides whether Stripe sees a 200 or a 500.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_billing.domain.models import SubscriptionSnapshot, WebhookOutcome
from src.ss_billing.domain.repository import (
    PaymentGatewayProtocol,
    SubscriptionRepositoryProtocol,
)
from src.ss_billing.domain.stripe_objects import (
    checkout_subscription_id,
    checkout_user_id,
    invoice_subscription_id,
    parse_subscription,
)
from src.ss_billing.infrastructure.persistence import SubscriptionRepository
from src.ss_billing.infrastructure.stripe_gateway import StripeGateway
from src.ss_common.enums import (
    ACCESS_GRANTING_SUBSCRIPTION_STATUSES,
    EntitlementSource,
    EntitlementStatus,
    SubscriptionStatus,
)
from src.ss_common.errors import AppError
from src.ss_common.ids import parse_uuid
from src.ss_entitlement.domain.repository import EntitlementRepositoryProtocol
from src.ss_entitlement.infrastructure.persistence import EntitlementRepository

logger = logging.getLogger(__name__)

_Handler = Callable[[AsyncSession, dict[str, Any]], Awaitable[WebhookOutcome]]

# Malformed signed payloads surface as lookup or type errors while parsing
_HANDLER_FAILURES = (SQLAlchemyError, AppError, KeyError, TypeError, ValueError, AttributeError)


def entitlement_status_for(subscription_status: str) -> str:
    if subscription_status in ACCESS_GRANTING_SUBSCRIPTION_STATUSES:
        return EntitlementStatus.ACTIVE.value
    return EntitlementStatus.INACTIVE.value


def _stripe_metadata(snapshot: SubscriptionSnapshot) -> dict[str, Any]:
    return {
        "stripe_customer_id": snapshot.customer_id,
        "stripe_subscription_id": snapshot.subscription_id,
        "stripe_price_id": snapshot.price_id,
    }


class WebhookReconciler:
    def __init__(
        self,
        gateway: PaymentGatewayProtocol | None = None,
        subscriptions: SubscriptionRepositoryProtocol | None = None,
        entitlements: EntitlementRepositoryProtocol | None = None,
    ) -> None:
        self._gateway: PaymentGatewayProtocol = gateway or StripeGateway()
        self._subs: SubscriptionRepositoryProtocol = subscriptions or SubscriptionRepository()
        self._ents: EntitlementRepositoryProtocol = entitlements or EntitlementRepository()
        self._handlers: dict[str, _Handler] = {
            "checkout.session.completed": self._on_checkout_completed,
            "customer.subscription.updated": self._on_subscription_updated,
            "customer.subscription.deleted": self._on_subscription_deleted,
            "invoice.payment_failed": self._on_payment_failed,
        }

    async def handle(self, db: AsyncSession, event: dict[str, Any]) -> WebhookOutcome:
        event_type = event.get("type", "")
        event_id = event.get("id", "?")
        handler = self._handlers.get(event_type)
        if handler is None:
            logger.info("Unhandled Stripe event %s (%s)", event_type, event_id)
            return WebhookOutcome.IGNORED

        try:
            obj = (event.get("data") or {}).get("object") or {}
            outcome = await handler(db, obj)
            if outcome is WebhookOutcome.APPLIED:
                await db.commit()
        except _HANDLER_FAILURES:
            await db.rollback()
            logger.exception("Stripe event %s (%s) failed", event_type, event_id)
            return WebhookOutcome.FAILED

        logger.info("Stripe event %s (%s): %s", event_type, event_id, outcome.value)
        return outcome

    async def _sync_entitlement(
        self, db: AsyncSession, user_id: str, snapshot: SubscriptionSnapshot
    ) -> None:
        await self._ents.upsert(
            db,
            user_id=user_id,
            source=EntitlementSource.STRIPE.value,
            status=entitlement_status_for(snapshot.status),
            expires_at=snapshot.current_period_end,
            metadata=_stripe_metadata(snapshot),
        )

    async def _on_checkout_completed(
        self, db: AsyncSession, session: dict[str, Any]
    ) -> WebhookOutcome:
        subscription_id = checkout_subscription_id(session)
        user_id = checkout_user_id(session)
        if not subscription_id or parse_uuid(user_id) is None:
            logger.info("Checkout session %s lacks subscription or user_id", session.get("id"))
            return WebhookOutcome.IGNORED

        if await self._subs.get_by_subscription_id(db, subscription_id) is not None:
            logger.info("Subscription %s already recorded; skipping", subscription_id)
            return WebhookOutcome.SKIPPED

        snapshot = await self._gateway.retrieve_subscription(subscription_id)
        await self._subs.upsert_for_user(db, user_id, snapshot)
        await self._sync_entitlement(db, user_id, snapshot)
        return WebhookOutcome.APPLIED

    async def _on_subscription_updated(
        self, db: AsyncSession, subscription: dict[str, Any]
    ) -> WebhookOutcome:
        snapshot = parse_subscription(subscription)
        mirror = await self._subs.update_from_snapshot(db, snapshot)
        if mirror is None:
            logger.info("No mirror for subscription %s; skipping update", snapshot.subscription_id)
            return WebhookOutcome.SKIPPED
        await self._sync_entitlement(db, mirror.user_id, snapshot)
        return WebhookOutcome.APPLIED

    async def _on_subscription_deleted(
        self, db: AsyncSession, subscription: dict[str, Any]
    ) -> WebhookOutcome:
        return await self._demote(db, subscription.get("id"), SubscriptionStatus.CANCELED.value)

    async def _on_payment_failed(
        self, db: AsyncSession, invoice: dict[str, Any]
    ) -> WebhookOutcome:
        subscription_id = invoice_subscription_id(invoice)
        if not subscription_id:
            logger.info("Invoice %s has no subscription", invoice.get("id"))
            return WebhookOutcome.IGNORED
        return await self._demote(db, subscription_id, SubscriptionStatus.PAST_DUE.value)

    async def _demote(
        self, db: AsyncSession, subscription_id: str | None, status: str
    ) -> WebhookOutcome:
        if not subscription_id:
            return WebhookOutcome.IGNORED
        mirror = await self._subs.get_by_subscription_id(db, subscription_id)
        if mirror is None:
            logger.info("No mirror for subscription %s; skipping %s", subscription_id, status)
            return WebhookOutcome.SKIPPED
        if mirror.status == status:
            logger.info("Subscription %s already %s; skipping", subscription_id, status)
            return WebhookOutcome.SKIPPED

        await self._subs.set_status(db, subscription_id, status)
        await self._ents.set_status(
            db,
            mirror.user_id,
            EntitlementStatus.INACTIVE.value,
            source=EntitlementSource.STRIPE.value,
        )
        return WebhookOutcome.APPLIED
