"""ShareLinkRepository — raw SQL against share_links.

Owner-scoped statements join through shows.user_id. `get_by_token` is the one
unscoped read: the public resolver has no caller identity to scope by.

Transaction ownership: the CALLER commits or rolls back.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.ids import parse_uuid
from src.ss_share.domain.models import ShareLink

_OWNS_SHOW_SQL = text("""
    SELECT 1 FROM shows
    WHERE id = CAST(:show_id AS UUID) AND user_id = CAST(:owner_id AS UUID)
""")

_GET_OWNED_BY_SHOW_SQL = text("""
    SELECT sl.id, sl.show_id, sl.token, sl.is_active, sl.created_at
    FROM share_links sl
    JOIN shows s ON s.id = sl.show_id
    WHERE sl.show_id = CAST(:show_id AS UUID) AND s.user_id = CAST(:owner_id AS UUID)
""")

# show_id is UNIQUE: concurrent first-share requests insert at most one row
_INSERT_IF_ABSENT_SQL = text("""
    INSERT INTO share_links (show_id, token, is_active)
    VALUES (CAST(:show_id AS UUID), :token, TRUE)
    ON CONFLICT (show_id) DO NOTHING
    RETURNING id, show_id, token, is_active, created_at
""")

_SET_ACTIVE_SQL = text("""
    UPDATE share_links sl
    SET is_active = :is_active
    FROM shows s
    WHERE sl.show_id = s.id
      AND sl.show_id = CAST(:show_id AS UUID)
      AND s.user_id = CAST(:owner_id AS UUID)
    RETURNING sl.id, sl.show_id, sl.token, sl.is_active, sl.created_at
""")

_GET_BY_TOKEN_SQL = text("""
    SELECT id, show_id, token, is_active, created_at
    FROM share_links
    WHERE token = :token
""")


def _row_to_link(row: Any) -> ShareLink:
    return ShareLink(
        id=str(row.id),
        show_id=str(row.show_id),
        token=row.token,
        is_active=row.is_active,
        created_at=row.created_at,
    )


class ShareLinkRepository:
    async def owns_show(self, db: AsyncSession, show_id: str, owner_id: str) -> bool:
        if parse_uuid(show_id) is None:
            return False
        result = await db.execute(_OWNS_SHOW_SQL, {"show_id": show_id, "owner_id": owner_id})
        return result.first() is not None

    async def get_owned_by_show(
        self, db: AsyncSession, show_id: str, owner_id: str
    ) -> ShareLink | None:
        if parse_uuid(show_id) is None:
            return None
        result = await db.execute(
            _GET_OWNED_BY_SHOW_SQL, {"show_id": show_id, "owner_id": owner_id}
        )
        row = result.fetchone()
        return _row_to_link(row) if row else None

    async def insert_if_absent(
        self, db: AsyncSession, show_id: str, token: str
    ) -> ShareLink | None:
        """Returns None when a link already existed (the caller re-reads it)."""
        result = await db.execute(_INSERT_IF_ABSENT_SQL, {"show_id": show_id, "token": token})
        row = result.fetchone()
        return _row_to_link(row) if row else None

    async def set_active(
        self, db: AsyncSession, show_id: str, owner_id: str, is_active: bool
    ) -> ShareLink | None:
        if parse_uuid(show_id) is None:
            return None
        result = await db.execute(
            _SET_ACTIVE_SQL,
            {"show_id": show_id, "owner_id": owner_id, "is_active": is_active},
        )
        row = result.fetchone()
        return _row_to_link(row) if row else None

    async def get_by_token(self, db: AsyncSession, token: str) -> ShareLink | None:
        result = await db.execute(_GET_BY_TOKEN_SQL, {"token": token})
        row = result.fetchone()
        return _row_to_link(row) if row else None
