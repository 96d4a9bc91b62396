"""Repository Protocol for shows.

Every method except `get_by_id_unscoped` filters by owner; a show owned by
someone else is indistinguishable from a missing one.
"""

from datetime import date, datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_settlement.domain.models import SettlementInput, SettlementResult
from src.ss_show.domain.models import Show


class ShowRepositoryProtocol(Protocol):
    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        title: str | None,
        show_date: date | None,
        inputs: SettlementInput,
        results: SettlementResult,
    ) -> Show: ...

    async def update(
        self,
        db: AsyncSession,
        show_id: str,
        user_id: str,
        title: str | None,
        show_date: date | None,
        inputs: SettlementInput,
        results: SettlementResult,
    ) -> Show | None: ...

    async def get_owned(
        self, db: AsyncSession, show_id: str, user_id: str
    ) -> Show | None: ...

    async def get_by_id_unscoped(self, db: AsyncSession, show_id: str) -> Show | None: ...

    async def list_owned(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: tuple[datetime, str] | None,
        limit: int,
    ) -> list[Show]: ...

    async def delete_owned(self, db: AsyncSession, show_id: str, user_id: str) -> bool: ...
