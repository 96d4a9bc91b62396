"""ShareLinkService — issue, toggle, and resolve public share tokens.

A token is minted once per show and never regenerated; turning sharing off
flips `is_active`. Resolution answers ShareLinkNotFoundError for unknown,
malformed and deactivated tokens alike, so the endpoint is no oracle for
which tokens were ever valid.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.errors import InternalError, ShareLinkNotFoundError, ShowNotFoundError
from src.ss_share.application.schemas import (
    ShareLinkLookupResponse,
    ShareLinkResponse,
    SharedSettlementResponse,
)
from src.ss_share.domain.repository import ShareLinkRepositoryProtocol
from src.ss_share.domain.token import is_well_formed, mint_token
from src.ss_share.infrastructure.persistence import ShareLinkRepository
from src.ss_show.domain.repository import ShowRepositoryProtocol
from src.ss_show.infrastructure.persistence import ShowRepository

logger = logging.getLogger(__name__)


class ShareLinkService:
    def __init__(
        self,
        repo: ShareLinkRepositoryProtocol | None = None,
        show_repo: ShowRepositoryProtocol | None = None,
    ) -> None:
        self._repo: ShareLinkRepositoryProtocol = repo or ShareLinkRepository()
        self._show_repo: ShowRepositoryProtocol = show_repo or ShowRepository()

    async def create_or_get_link(
        self, db: AsyncSession, show_id: str, owner_id: str
    ) -> ShareLinkResponse:
        """Idempotent: an existing link is returned unchanged, never regenerated."""
        if not await self._repo.owns_show(db, show_id, owner_id):
            raise ShowNotFoundError(show_id)

        existing = await self._repo.get_owned_by_show(db, show_id, owner_id)
        if existing is not None:
            return ShareLinkResponse.from_domain(existing, already_exists=True)

        try:
            created = await self._repo.insert_if_absent(db, show_id, mint_token())
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if created is not None:
            logger.info("Share link issued for show %s", show_id)
            return ShareLinkResponse.from_domain(created)

        # Lost the race to a concurrent request; serve the winner's token
        winner = await self._repo.get_owned_by_show(db, show_id, owner_id)
        if winner is None:
            raise InternalError("Share link vanished after insert conflict")
        return ShareLinkResponse.from_domain(winner, already_exists=True)

    async def get_link(
        self, db: AsyncSession, show_id: str, owner_id: str
    ) -> ShareLinkLookupResponse:
        link = await self._repo.get_owned_by_show(db, show_id, owner_id)
        if link is None:
            return ShareLinkLookupResponse(exists=False)
        return ShareLinkLookupResponse(
            exists=True,
            token=link.token,
            is_active=link.is_active,
            created_at=link.created_at.isoformat(),
        )

    async def toggle(
        self, db: AsyncSession, show_id: str, owner_id: str, is_active: bool
    ) -> ShareLinkResponse:
        try:
            link = await self._repo.set_active(db, show_id, owner_id, is_active)
            if link is None:
                raise ShareLinkNotFoundError()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ShareLinkResponse.from_domain(link)

    async def resolve(self, db: AsyncSession, token: str) -> SharedSettlementResponse:
        if not is_well_formed(token):
            raise ShareLinkNotFoundError()

        link = await self._repo.get_by_token(db, token)
        if link is None or not link.is_active:
            raise ShareLinkNotFoundError()

        show = await self._show_repo.get_by_id_unscoped(db, link.show_id)
        if show is None:
            raise ShareLinkNotFoundError()
        return SharedSettlementResponse.from_show(show)
