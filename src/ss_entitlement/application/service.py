"""EntitlementService — the single access gate.

No caching: every call re-reads the user's entitlement row.
"""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.datetime_utils import utc_now
from src.ss_common.enums import EntitlementSource, EntitlementStatus
from src.ss_entitlement.application.schemas import (
    EntitlementDetailsResponse,
    EntitlementItem,
)
from src.ss_entitlement.domain.models import Entitlement
from src.ss_entitlement.domain.policy import grants_access
from src.ss_entitlement.domain.repository import EntitlementRepositoryProtocol
from src.ss_entitlement.infrastructure.persistence import EntitlementRepository


class EntitlementService:
    def __init__(self, repo: EntitlementRepositoryProtocol | None = None) -> None:
        self._repo: EntitlementRepositoryProtocol = repo or EntitlementRepository()

    async def get_entitlement(self, db: AsyncSession, user_id: str) -> Entitlement | None:
        return await self._repo.get_by_user_id(db, user_id)

    async def has_access(
        self, db: AsyncSession, user_id: str, now: datetime | None = None
    ) -> bool:
        entitlement = await self._repo.get_by_user_id(db, user_id)
        return grants_access(entitlement, now or utc_now())

    async def get_details(
        self, db: AsyncSession, user_id: str, now: datetime | None = None
    ) -> EntitlementDetailsResponse:
        entitlement = await self._repo.get_by_user_id(db, user_id)
        return EntitlementDetailsResponse(
            has_access=grants_access(entitlement, now or utc_now()),
            entitlement=EntitlementItem.from_domain(entitlement) if entitlement else None,
        )

    async def grant_manual(
        self,
        db: AsyncSession,
        user_id: str,
        source: EntitlementSource,
        expires_at: datetime | None,
        granted_by: str,
        reason: str | None = None,
    ) -> Entitlement:
        """Upsert an active non-Stripe entitlement, overwriting whatever was there."""
        if source == EntitlementSource.STRIPE:
            raise ValueError("Stripe entitlements are written by the webhook only")
        metadata: dict[str, Any] = {"granted_via": "admin_api"}
        if reason:
            metadata["reason"] = reason
        try:
            entitlement = await self._repo.upsert(
                db,
                user_id=user_id,
                source=source.value,
                status=EntitlementStatus.ACTIVE.value,
                expires_at=expires_at,
                metadata=metadata,
                granted_by=granted_by,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return entitlement

    async def deactivate(self, db: AsyncSession, user_id: str) -> Entitlement | None:
        try:
            entitlement = await self._repo.set_status(
                db, user_id, EntitlementStatus.INACTIVE.value
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return entitlement
