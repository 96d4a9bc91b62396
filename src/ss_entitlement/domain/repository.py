"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
"""

from datetime import datetime
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_entitlement.domain.models import Entitlement


class EntitlementRepositoryProtocol(Protocol):
    async def get_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Entitlement | None: ...

    async def upsert(
        self,
        db: AsyncSession,
        user_id: str,
        source: str,
        status: str,
        expires_at: datetime | None,
        metadata: dict[str, Any],
        granted_by: str | None = None,
    ) -> Entitlement: ...

    async def set_status(
        self,
        db: AsyncSession,
        user_id: str,
        status: str,
        source: str | None = None,
    ) -> Entitlement | None: ...
