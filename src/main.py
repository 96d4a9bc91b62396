"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.ss_admin.api.router import router as admin_router
from src.ss_billing.api.router import router as billing_router
from src.ss_common.database import engine
from src.ss_common.errors import AppError
from src.ss_common.redis_client import close_redis, get_redis
from src.ss_common.response import error_response
from src.ss_entitlement.api.router import router as entitlement_router
from src.ss_gateway.api.router import router as auth_router
from src.ss_gateway.middleware.rate_limit import RateLimitMiddleware
from src.ss_gateway.middleware.request_log import RequestLogMiddleware
from src.ss_settlement.api.router import router as settlement_router
from src.ss_share.api.router import router as share_router
from src.ss_show.api.router import router as show_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


# Added last = outermost: request ids exist before rate limiting answers
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(entitlement_router, prefix="/api/v1")
app.include_router(show_router, prefix="/api/v1")
app.include_router(share_router, prefix="/api/v1")
app.include_router(billing_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
