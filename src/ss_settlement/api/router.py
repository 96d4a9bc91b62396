"""Settlement calculator API — stateless, requires JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ss_common.response import ApiResponse, success_response
from src.ss_gateway.auth.dependencies import get_current_user
from src.ss_gateway.user.db_models import UserModel
from src.ss_settlement.application.schemas import (
    SettlementInputSchema,
    SettlementResultSchema,
)
from src.ss_settlement.domain.engine import compute

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("/calculate", summary="Compute a settlement without saving it")
async def calculate(
    body: SettlementInputSchema,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    request: Request,
) -> ApiResponse:
    result = compute(body.to_domain())
    data = SettlementResultSchema.from_domain(result)
    return success_response(data.model_dump(), request)
