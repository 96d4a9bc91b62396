"""Entitlement query API. The authenticated owner sees only their own record."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ss_common.database import get_db_session
from src.ss_common.response import ApiResponse, success_response
from src.ss_entitlement.application.service import EntitlementService
from src.ss_gateway.auth.dependencies import get_current_user
from src.ss_gateway.user.db_models import UserModel

router = APIRouter(prefix="/entitlements", tags=["entitlements"])

_service = EntitlementService()


@router.get("/me")
async def get_my_entitlement(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_details(db, str(current_user.id))
    return success_response(data.model_dump(), request)
