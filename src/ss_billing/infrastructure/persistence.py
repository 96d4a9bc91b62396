"""SubscriptionRepository — concrete implementation of SubscriptionRepositoryProtocol.

Transaction ownership: the CALLER commits or rolls back.
"""

import uuid
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_billing.domain.models import SubscriptionMirror, SubscriptionSnapshot
from src.ss_billing.infrastructure.db_models import SubscriptionORM
from src.ss_common.errors import InternalError

_TABLE = SubscriptionORM.__table__


def _row_to_mirror(row: Any) -> SubscriptionMirror:
    return SubscriptionMirror(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        stripe_customer_id=row["stripe_customer_id"],
        stripe_subscription_id=row["stripe_subscription_id"],
        stripe_price_id=row["stripe_price_id"],
        status=row["status"],
        current_period_start=row["current_period_start"],
        current_period_end=row["current_period_end"],
        cancel_at_period_end=bool(row["cancel_at_period_end"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _snapshot_values(snapshot: SubscriptionSnapshot) -> dict[str, Any]:
    return {
        "stripe_customer_id": snapshot.customer_id,
        "stripe_subscription_id": snapshot.subscription_id,
        "stripe_price_id": snapshot.price_id,
        "status": snapshot.status,
        "current_period_start": snapshot.current_period_start,
        "current_period_end": snapshot.current_period_end,
        "cancel_at_period_end": snapshot.cancel_at_period_end,
    }


class SubscriptionRepository:
    async def get_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> SubscriptionMirror | None:
        result = await db.execute(
            select(_TABLE).where(_TABLE.c.user_id == uuid.UUID(user_id))
        )
        row = result.mappings().first()
        return _row_to_mirror(row) if row else None

    async def get_by_subscription_id(
        self, db: AsyncSession, subscription_id: str
    ) -> SubscriptionMirror | None:
        result = await db.execute(
            select(_TABLE).where(_TABLE.c.stripe_subscription_id == subscription_id)
        )
        row = result.mappings().first()
        return _row_to_mirror(row) if row else None

    async def upsert_for_user(
        self, db: AsyncSession, user_id: str, snapshot: SubscriptionSnapshot
    ) -> SubscriptionMirror:
        values = _snapshot_values(snapshot)
        stmt = pg_insert(_TABLE).values(user_id=uuid.UUID(user_id), **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[_TABLE.c.user_id],
            set_={**{k: stmt.excluded[k] for k in values}, "updated_at": func.now()},
        ).returning(*_TABLE.c)
        row = (await db.execute(stmt)).mappings().first()
        if row is None:
            raise InternalError("Subscription upsert returned no rows")
        return _row_to_mirror(row)

    async def update_from_snapshot(
        self, db: AsyncSession, snapshot: SubscriptionSnapshot
    ) -> SubscriptionMirror | None:
        stmt = (
            update(_TABLE)
            .where(_TABLE.c.stripe_subscription_id == snapshot.subscription_id)
            .values(
                stripe_price_id=snapshot.price_id,
                status=snapshot.status,
                current_period_start=snapshot.current_period_start,
                current_period_end=snapshot.current_period_end,
                cancel_at_period_end=snapshot.cancel_at_period_end,
                updated_at=func.now(),
            )
            .returning(*_TABLE.c)
        )
        row = (await db.execute(stmt)).mappings().first()
        return _row_to_mirror(row) if row else None

    async def set_status(
        self, db: AsyncSession, subscription_id: str, status: str
    ) -> SubscriptionMirror | None:
        stmt = (
            update(_TABLE)
            .where(_TABLE.c.stripe_subscription_id == subscription_id)
            .values(status=status, updated_at=func.now())
            .returning(*_TABLE.c)
        )
        row = (await db.execute(stmt)).mappings().first()
        return _row_to_mirror(row) if row else None
