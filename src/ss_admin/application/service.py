# src/ss_admin/application/service.py
"""Admin application service — manual entitlement grants outside Stripe."""
import logging
import uuid

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.errors import UserNotFoundError
from src.ss_entitlement.application.schemas import EntitlementItem, ManualGrantRequest
from src.ss_entitlement.application.service import EntitlementService

logger = logging.getLogger(__name__)

_USER_EXISTS_SQL = text("SELECT 1 FROM users WHERE id = :user_id")


class AdminService:
    def __init__(self, entitlements: EntitlementService | None = None) -> None:
        self._entitlements = entitlements or EntitlementService()

    async def _require_user(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        result = await db.execute(_USER_EXISTS_SQL, {"user_id": user_id})
        if result.first() is None:
            raise UserNotFoundError(str(user_id))

    async def grant(
        self, db: AsyncSession, body: ManualGrantRequest, admin_id: str
    ) -> EntitlementItem:
        await self._require_user(db, body.user_id)
        entitlement = await self._entitlements.grant_manual(
            db,
            user_id=str(body.user_id),
            source=body.source,
            expires_at=body.expires_at,
            granted_by=admin_id,
            reason=body.reason,
        )
        logger.info(
            "Admin %s granted %s access to user %s (expires %s)",
            admin_id, body.source.value, body.user_id, body.expires_at,
        )
        return EntitlementItem.from_domain(entitlement)

    async def deactivate(
        self, db: AsyncSession, user_id: uuid.UUID, admin_id: str
    ) -> EntitlementItem | None:
        await self._require_user(db, user_id)
        entitlement = await self._entitlements.deactivate(db, str(user_id))
        logger.info("Admin %s deactivated entitlement of user %s", admin_id, user_id)
        return EntitlementItem.from_domain(entitlement) if entitlement else None
