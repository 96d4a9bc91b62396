"""EntitlementRepository — concrete implementation of EntitlementRepositoryProtocol.

Writes are single-statement upserts (INSERT ... ON CONFLICT (user_id) DO UPDATE),
so concurrent writers for one user converge on last-write-wins without a
read-then-write race.

Transaction ownership: the CALLER commits or rolls back.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.errors import InternalError
from src.ss_entitlement.domain.models import Entitlement
from src.ss_entitlement.infrastructure.db_models import EntitlementORM

_TABLE = EntitlementORM.__table__


def _row_to_entitlement(row: Any) -> Entitlement:
    return Entitlement(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        source=row["source"],
        status=row["status"],
        granted_by=str(row["granted_by"]) if row["granted_by"] else None,
        granted_at=row["granted_at"],
        expires_at=row["expires_at"],
        metadata=dict(row["metadata"] or {}),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class EntitlementRepository:
    async def get_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Entitlement | None:
        result = await db.execute(
            select(_TABLE).where(_TABLE.c.user_id == uuid.UUID(user_id))
        )
        row = result.mappings().first()
        return _row_to_entitlement(row) if row else None

    async def upsert(
        self,
        db: AsyncSession,
        user_id: str,
        source: str,
        status: str,
        expires_at: datetime | None,
        metadata: dict[str, Any],
        granted_by: str | None = None,
    ) -> Entitlement:
        stmt = pg_insert(_TABLE).values(
            user_id=uuid.UUID(user_id),
            source=source,
            status=status,
            expires_at=expires_at,
            metadata=metadata,
            granted_by=uuid.UUID(granted_by) if granted_by else None,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[_TABLE.c.user_id],
            set_={
                "source": stmt.excluded.source,
                "status": stmt.excluded.status,
                "expires_at": stmt.excluded.expires_at,
                "metadata": stmt.excluded["metadata"],
                "granted_by": stmt.excluded.granted_by,
                "updated_at": func.now(),
            },
        ).returning(*_TABLE.c)
        row = (await db.execute(stmt)).mappings().first()
        if row is None:
            raise InternalError("Entitlement upsert returned no rows")
        return _row_to_entitlement(row)

    async def set_status(
        self,
        db: AsyncSession,
        user_id: str,
        status: str,
        source: str | None = None,
    ) -> Entitlement | None:
        """Flip status in place. With `source`, only rows from that source are touched
        (a Stripe event never demotes a manual grant)."""
        stmt = (
            update(_TABLE)
            .where(_TABLE.c.user_id == uuid.UUID(user_id))
            .values(status=status, updated_at=func.now())
            .returning(*_TABLE.c)
        )
        if source is not None:
            stmt = stmt.where(_TABLE.c.source == source)
        row = (await db.execute(stmt)).mappings().first()
        return _row_to_entitlement(row) if row else None
