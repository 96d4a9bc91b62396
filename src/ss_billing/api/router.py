"""Billing API: checkout/portal redirects, subscription lookup, Stripe webhook."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ss_billing.application.reconciler import WebhookReconciler
from src.ss_billing.application.service import BillingService
from src.ss_billing.domain.models import WebhookOutcome
from src.ss_billing.infrastructure.stripe_gateway import StripeGateway
from src.ss_common.database import get_db_session
from src.ss_common.errors import WebhookSignatureError
from src.ss_common.response import ApiResponse, success_response
from src.ss_gateway.auth.dependencies import get_current_user
from src.ss_gateway.user.db_models import UserModel

router = APIRouter(tags=["billing"])

_gateway = StripeGateway()
_service = BillingService(gateway=_gateway)
_reconciler = WebhookReconciler(gateway=_gateway)


@router.post("/billing/checkout")
async def create_checkout(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.create_checkout(db, str(current_user.id), current_user.email)
    return success_response(data.model_dump(), request)


@router.post("/billing/portal")
async def create_portal(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.create_portal(db, str(current_user.id))
    return success_response(data.model_dump(), request)


@router.get("/billing/subscription")
async def get_subscription(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_subscription(db, str(current_user.id))
    return success_response(data.model_dump() if data else None, request)


@router.post("/webhooks/stripe", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    stripe_signature: Annotated[str | None, Header(alias="Stripe-Signature")] = None,
) -> JSONResponse:
    if not stripe_signature:
        raise WebhookSignatureError("Missing Stripe-Signature header")
    payload = await request.body()
    event = _gateway.verify_event(payload, stripe_signature)

    outcome = await _reconciler.handle(db, event)
    if outcome is WebhookOutcome.FAILED and not settings.WEBHOOK_ACK_ON_FAILURE:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"received": False},
        )
    return JSONResponse(content={"received": True})
