"""Share link API.

Management endpoints need an entitlement and operate only on the caller's
shows. GET /s/{token} is public and unauthenticated.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.database import get_db_session
from src.ss_common.response import ApiResponse, success_response
from src.ss_gateway.auth.dependencies import require_entitlement
from src.ss_gateway.user.db_models import UserModel
from src.ss_share.application.schemas import (
    CreateShareLinkRequest,
    ToggleShareLinkRequest,
)
from src.ss_share.application.service import ShareLinkService

router = APIRouter(tags=["share-links"])

_service = ShareLinkService()


@router.post("/share-links", response_model=ApiResponse)
async def create_share_link(
    body: CreateShareLinkRequest,
    current_user: Annotated[UserModel, Depends(require_entitlement)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> JSONResponse:
    data = await _service.create_or_get_link(db, body.show_id, str(current_user.id))
    resp = success_response(data.model_dump(), request)
    return JSONResponse(
        status_code=status.HTTP_200_OK if data.already_exists else status.HTTP_201_CREATED,
        content=resp.model_dump(),
    )


@router.get("/share-links")
async def get_share_link(
    current_user: Annotated[UserModel, Depends(require_entitlement)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    show_id: str = Query(..., description="Show to look up"),
) -> ApiResponse:
    data = await _service.get_link(db, show_id, str(current_user.id))
    return success_response(data.model_dump(), request)


@router.post("/share-links/toggle")
async def toggle_share_link(
    body: ToggleShareLinkRequest,
    current_user: Annotated[UserModel, Depends(require_entitlement)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.toggle(db, body.show_id, str(current_user.id), body.is_active)
    return success_response(data.model_dump(), request)


@router.get("/s/{token}", summary="Public read-only settlement")
async def resolve_share_link(
    token: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.resolve(db, token)
    return success_response(data.model_dump(), request)
