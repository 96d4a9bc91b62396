"""Repository Protocol for share links."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_share.domain.models import ShareLink


class ShareLinkRepositoryProtocol(Protocol):
    async def owns_show(self, db: AsyncSession, show_id: str, owner_id: str) -> bool: ...

    async def get_owned_by_show(
        self, db: AsyncSession, show_id: str, owner_id: str
    ) -> ShareLink | None: ...

    async def insert_if_absent(
        self, db: AsyncSession, show_id: str, token: str
    ) -> ShareLink | None: ...

    async def set_active(
        self, db: AsyncSession, show_id: str, owner_id: str, is_active: bool
    ) -> ShareLink | None: ...

    async def get_by_token(self, db: AsyncSession, token: str) -> ShareLink | None: ...
