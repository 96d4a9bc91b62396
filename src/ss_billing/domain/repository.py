"""Repository and payment-gateway Protocols for ss_billing.

Unit tests inject mocks conforming to these Protocols.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_billing.domain.models import SubscriptionMirror, SubscriptionSnapshot


class SubscriptionRepositoryProtocol(Protocol):
    async def get_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> SubscriptionMirror | None: ...

    async def get_by_subscription_id(
        self, db: AsyncSession, subscription_id: str
    ) -> SubscriptionMirror | None: ...

    async def upsert_for_user(
        self, db: AsyncSession, user_id: str, snapshot: SubscriptionSnapshot
    ) -> SubscriptionMirror: ...

    async def update_from_snapshot(
        self, db: AsyncSession, snapshot: SubscriptionSnapshot
    ) -> SubscriptionMirror | None: ...

    async def set_status(
        self, db: AsyncSession, subscription_id: str, status: str
    ) -> SubscriptionMirror | None: ...


class PaymentGatewayProtocol(Protocol):
    def verify_event(self, payload: bytes, signature: str) -> dict[str, Any]: ...

    async def retrieve_subscription(self, subscription_id: str) -> SubscriptionSnapshot: ...

    async def find_or_create_customer(self, email: str, user_id: str) -> str: ...

    async def create_checkout_session(
        self,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        user_id: str,
    ) -> str: ...

    async def create_portal_session(self, customer_id: str, return_url: str) -> str: ...
