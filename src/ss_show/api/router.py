"""ss_show REST API — saved settlements.

Saving (create/update) is a paid feature; reading and deleting your own shows
only needs a login so lapsed subscribers keep access to their history.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.database import get_db_session
from src.ss_common.response import ApiResponse, success_response
from src.ss_gateway.auth.dependencies import get_current_user, require_entitlement
from src.ss_gateway.user.db_models import UserModel
from src.ss_show.application.schemas import SaveShowRequest
from src.ss_show.application.service import ShowApplicationService

router = APIRouter(prefix="/shows", tags=["shows"])

_service = ShowApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_show(
    body: SaveShowRequest,
    current_user: Annotated[UserModel, Depends(require_entitlement)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.create_show(db, str(current_user.id), body)
    return success_response(data.model_dump(), request)


@router.put("/{show_id}")
async def update_show(
    show_id: str,
    body: SaveShowRequest,
    current_user: Annotated[UserModel, Depends(require_entitlement)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.update_show(db, show_id, str(current_user.id), body)
    return success_response(data.model_dump(), request)


@router.get("")
async def list_shows(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_shows(db, str(current_user.id), cursor, limit)
    return success_response(data.model_dump(), request)


@router.get("/{show_id}")
async def get_show(
    show_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_show(db, show_id, str(current_user.id))
    return success_response(data.model_dump(), request)


@router.delete("/{show_id}")
async def delete_show(
    show_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _service.delete_show(db, show_id, str(current_user.id))
    return success_response({"id": show_id, "deleted": True}, request)
