# src/ss_admin/api/router.py
"""Admin REST API."""
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_admin.application.service import AdminService
from src.ss_common.database import get_db_session
from src.ss_common.response import ApiResponse, success_response
from src.ss_entitlement.application.schemas import ManualGrantRequest
from src.ss_gateway.auth.dependencies import require_admin
from src.ss_gateway.user.db_models import UserModel

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.post("/entitlements")
async def grant_entitlement(
    body: ManualGrantRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.grant(db, body, str(admin.id))
    return success_response(result.model_dump(), request)


@router.post("/entitlements/{user_id}/deactivate")
async def deactivate_entitlement(
    user_id: uuid.UUID,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.deactivate(db, user_id, str(admin.id))
    return success_response(result.model_dump() if result else None, request)
