"""ShowApplicationService — persists calculator results.

Every save recomputes the settlement server-side from the submitted inputs;
client-supplied results are never stored.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.errors import ShowNotFoundError
from src.ss_settlement.domain.engine import compute
from src.ss_show.application.schemas import (
    SaveShowRequest,
    ShowDetail,
    ShowListItem,
    ShowListResponse,
    cursor_decode,
    cursor_encode,
)
from src.ss_show.domain.models import Show
from src.ss_show.domain.repository import ShowRepositoryProtocol
from src.ss_show.infrastructure.persistence import ShowRepository


class ShowApplicationService:
    def __init__(self, repo: ShowRepositoryProtocol | None = None) -> None:
        self._repo: ShowRepositoryProtocol = repo or ShowRepository()

    async def create_show(
        self, db: AsyncSession, user_id: str, body: SaveShowRequest
    ) -> ShowDetail:
        inputs = body.inputs.to_domain()
        results = compute(inputs)  # raises before anything is written
        try:
            show = await self._repo.create(
                db, user_id, body.title, body.show_date, inputs, results
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ShowDetail.from_domain(show)

    async def update_show(
        self, db: AsyncSession, show_id: str, user_id: str, body: SaveShowRequest
    ) -> ShowDetail:
        inputs = body.inputs.to_domain()
        results = compute(inputs)
        try:
            show = await self._repo.update(
                db, show_id, user_id, body.title, body.show_date, inputs, results
            )
            if show is None:
                raise ShowNotFoundError(show_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ShowDetail.from_domain(show)

    async def get_show(self, db: AsyncSession, show_id: str, user_id: str) -> ShowDetail:
        return ShowDetail.from_domain(await self.require_owned(db, show_id, user_id))

    async def require_owned(self, db: AsyncSession, show_id: str, user_id: str) -> Show:
        show = await self._repo.get_owned(db, show_id, user_id)
        if show is None:
            raise ShowNotFoundError(show_id)
        return show

    async def list_shows(
        self, db: AsyncSession, user_id: str, cursor: str | None, limit: int
    ) -> ShowListResponse:
        # Fetch limit+1 to detect has_more without COUNT(*)
        shows = await self._repo.list_owned(db, user_id, cursor_decode(cursor), limit + 1)
        has_more = len(shows) > limit
        page = shows[:limit]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return ShowListResponse(
            items=[ShowListItem.from_domain(s) for s in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def delete_show(self, db: AsyncSession, show_id: str, user_id: str) -> None:
        """Deletes the show; its share link goes with it (ON DELETE CASCADE)."""
        try:
            deleted = await self._repo.delete_owned(db, show_id, user_id)
            if not deleted:
                raise ShowNotFoundError(show_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
