"""Request logging middleware.

Logs every HTTP request with method, path, status code, latency, and
a short request ID for correlation. The request_id is also injected into
request.state so router handlers can include it in ApiResponse.

Log format:
    INFO [POST] /api/v1/shows → 201 (23ms) req_a1b2c3d4e5f6

Share tokens in /api/v1/s/{token} paths are masked before logging.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("ss.request")

_SHARE_PATH_RE = re.compile(r"(/s/)([^/]{8})[^/]*")


def mask_share_token(path: str) -> str:
    """'/api/v1/s/abcdef0123...' -> '/api/v1/s/abcdef01…'."""
    return _SHARE_PATH_RE.sub(r"\1\2…", path)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            mask_share_token(request.url.path),
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        return response
