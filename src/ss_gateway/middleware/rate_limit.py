"""Fixed-window rate limiting backed by Redis.

Rules (requests per minute per client IP):
  - Auth endpoints (/auth/*):          RATE_LIMIT_AUTH_PER_MINUTE   (anti brute-force)
  - Public share resolution (/s/*):    RATE_LIMIT_SHARE_PER_MINUTE  (anti token guessing)

Key pattern: "ratelimit:{group}:{ip}:{window}". INCR + EXPIRE on first hit.
Redis errors fail open: the request proceeds and a warning is logged.
"""

import logging
import time

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.settings import settings
from src.ss_common.errors import RateLimitError
from src.ss_common.redis_client import get_redis
from src.ss_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60


def endpoint_group(path: str) -> tuple[str, int] | None:
    """Return (group, limit) for rate-limited paths, None otherwise."""
    if path.startswith("/api/v1/auth/"):
        return "auth", settings.RATE_LIMIT_AUTH_PER_MINUTE
    if path.startswith("/api/v1/s/"):
        return "share", settings.RATE_LIMIT_SHARE_PER_MINUTE
    return None


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a reverse proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rule = endpoint_group(request.url.path)
        if rule is None:
            return await call_next(request)

        group, limit = rule
        window = int(time.time()) // _WINDOW_SECONDS
        key = f"ratelimit:{group}:{client_ip(request)}:{window}"
        try:
            redis = await get_redis()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)
        except RedisError:
            logger.warning("Rate limiter unavailable, allowing request to %s", group)
            return await call_next(request)

        if count > limit:
            err = RateLimitError()
            retry_after = _WINDOW_SECONDS - int(time.time()) % _WINDOW_SECONDS
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message).model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
