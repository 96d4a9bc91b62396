"""BillingService — checkout and portal sessions, subscription lookup."""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ss_billing.application.schemas import RedirectUrlResponse, SubscriptionResponse
from src.ss_billing.domain.repository import (
    PaymentGatewayProtocol,
    SubscriptionRepositoryProtocol,
)
from src.ss_billing.infrastructure.persistence import SubscriptionRepository
from src.ss_billing.infrastructure.stripe_gateway import StripeGateway
from src.ss_common.enums import ACCESS_GRANTING_SUBSCRIPTION_STATUSES
from src.ss_common.errors import (
    AlreadySubscribedError,
    BillingNotConfiguredError,
    NoSubscriptionError,
)


class BillingService:
    def __init__(
        self,
        gateway: PaymentGatewayProtocol | None = None,
        repo: SubscriptionRepositoryProtocol | None = None,
        price_id: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self._gateway: PaymentGatewayProtocol = gateway or StripeGateway()
        self._repo: SubscriptionRepositoryProtocol = repo or SubscriptionRepository()
        self._price_id = settings.STRIPE_PRICE_ID if price_id is None else price_id
        self._base_url = (base_url or settings.APP_BASE_URL).rstrip("/")

    async def create_checkout(
        self, db: AsyncSession, user_id: str, email: str
    ) -> RedirectUrlResponse:
        if not self._price_id:
            raise BillingNotConfiguredError("STRIPE_PRICE_ID")

        mirror = await self._repo.get_by_user_id(db, user_id)
        if mirror is not None and mirror.status in ACCESS_GRANTING_SUBSCRIPTION_STATUSES:
            raise AlreadySubscribedError()

        customer_id = await self._gateway.find_or_create_customer(email, user_id)
        url = await self._gateway.create_checkout_session(
            customer_id=customer_id,
            price_id=self._price_id,
            success_url=f"{self._base_url}/dashboard?checkout=success",
            cancel_url=f"{self._base_url}/pricing?checkout=canceled",
            user_id=user_id,
        )
        return RedirectUrlResponse(url=url)

    async def create_portal(self, db: AsyncSession, user_id: str) -> RedirectUrlResponse:
        mirror = await self._repo.get_by_user_id(db, user_id)
        if mirror is None or not mirror.stripe_customer_id:
            raise NoSubscriptionError()
        url = await self._gateway.create_portal_session(
            mirror.stripe_customer_id, f"{self._base_url}/dashboard"
        )
        return RedirectUrlResponse(url=url)

    async def get_subscription(
        self, db: AsyncSession, user_id: str
    ) -> SubscriptionResponse | None:
        mirror = await self._repo.get_by_user_id(db, user_id)
        return SubscriptionResponse.from_domain(mirror) if mirror else None
