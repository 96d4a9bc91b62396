"""ShowRepository — concrete implementation of ShowRepositoryProtocol.

Owner scoping is part of every WHERE clause, so an update or delete aimed at
another user's show matches zero rows.

Transaction ownership: the CALLER commits or rolls back.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import and_, delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.errors import CorruptShowRecordError, InternalError
from src.ss_common.ids import parse_uuid
from src.ss_settlement.domain.models import SettlementInput, SettlementResult
from src.ss_show.domain.models import Show
from src.ss_show.domain.snapshot import (
    SnapshotError,
    dump_inputs,
    dump_results,
    load_inputs,
    load_results,
)
from src.ss_show.infrastructure.db_models import ShowORM

logger = logging.getLogger(__name__)

_TABLE = ShowORM.__table__


def _row_to_show(row: Any) -> Show:
    try:
        inputs = load_inputs(row["inputs"])
        results = load_results(row["results"])
    except SnapshotError as exc:
        logger.error("Unreadable settlement snapshot on show %s: %s", row["id"], exc)
        raise CorruptShowRecordError(str(row["id"])) from exc
    return Show(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=row["title"],
        show_date=row["show_date"],
        inputs=inputs,
        results=results,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ShowRepository:
    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        title: str | None,
        show_date: date | None,
        inputs: SettlementInput,
        results: SettlementResult,
    ) -> Show:
        stmt = (
            insert(_TABLE)
            .values(
                user_id=uuid.UUID(user_id),
                title=title,
                show_date=show_date,
                inputs=dump_inputs(inputs),
                results=dump_results(results),
            )
            .returning(*_TABLE.c)
        )
        row = (await db.execute(stmt)).mappings().first()
        if row is None:
            raise InternalError("Show insert returned no rows")
        return _row_to_show(row)

    async def update(
        self,
        db: AsyncSession,
        show_id: str,
        user_id: str,
        title: str | None,
        show_date: date | None,
        inputs: SettlementInput,
        results: SettlementResult,
    ) -> Show | None:
        sid = parse_uuid(show_id)
        if sid is None:
            return None
        stmt = (
            update(_TABLE)
            .where(_TABLE.c.id == sid, _TABLE.c.user_id == uuid.UUID(user_id))
            .values(
                title=title,
                show_date=show_date,
                inputs=dump_inputs(inputs),
                results=dump_results(results),
                updated_at=func.now(),
            )
            .returning(*_TABLE.c)
        )
        row = (await db.execute(stmt)).mappings().first()
        return _row_to_show(row) if row else None

    async def get_owned(
        self, db: AsyncSession, show_id: str, user_id: str
    ) -> Show | None:
        sid = parse_uuid(show_id)
        if sid is None:
            return None
        result = await db.execute(
            select(_TABLE).where(_TABLE.c.id == sid, _TABLE.c.user_id == uuid.UUID(user_id))
        )
        row = result.mappings().first()
        return _row_to_show(row) if row else None

    async def get_by_id_unscoped(self, db: AsyncSession, show_id: str) -> Show | None:
        """No owner filter — only for the public share-token path."""
        sid = parse_uuid(show_id)
        if sid is None:
            return None
        result = await db.execute(select(_TABLE).where(_TABLE.c.id == sid))
        row = result.mappings().first()
        return _row_to_show(row) if row else None

    async def list_owned(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: tuple[datetime, str] | None,
        limit: int,
    ) -> list[Show]:
        stmt = select(_TABLE).where(_TABLE.c.user_id == uuid.UUID(user_id))
        if cursor is not None:
            cursor_ts, cursor_id = cursor
            stmt = stmt.where(
                or_(
                    _TABLE.c.created_at < cursor_ts,
                    and_(_TABLE.c.created_at == cursor_ts, _TABLE.c.id < uuid.UUID(cursor_id)),
                )
            )
        stmt = stmt.order_by(_TABLE.c.created_at.desc(), _TABLE.c.id.desc()).limit(limit)
        result = await db.execute(stmt)
        return [_row_to_show(row) for row in result.mappings().all()]

    async def delete_owned(self, db: AsyncSession, show_id: str, user_id: str) -> bool:
        sid = parse_uuid(show_id)
        if sid is None:
            return False
        result = await db.execute(
            delete(_TABLE)
            .where(_TABLE.c.id == sid, _TABLE.c.user_id == uuid.UUID(user_id))
            .returning(_TABLE.c.id)
        )
        return result.first() is not None
