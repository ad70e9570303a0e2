"""
Middleware: request context (correlation id + timing), secure headers.
Order matters: error handling wraps innermost; then request context; then security; then CORS.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Annotated, Callable

from fastapi import Depends, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from utils.logging import get_logger, get_request_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"

# Docs UI assets are served from the jsDelivr CDN and use inline scripts/styles.
CONTENT_SECURITY_POLICY = "; ".join(
    (
        "default-src 'self'",
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "script-src 'self' 'unsafe-inline' 'unsafe-eval' https://cdn.jsdelivr.net",
        "img-src 'self' data: https:",
    )
)
HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"


@dataclass(frozen=True)
class RequestContext:
    """Per-request correlation id and perf_counter() start time."""

    id: str
    start_time: float


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Assigns a correlation id (inbound X-Request-Id or a fresh uuid4) and a
    request-scoped logger; echoes the id and logs duration on completion.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_logger = get_request_logger(logger, request_id)
        request.state.context = RequestContext(id=request_id, start_time=start)
        request.state.logger = request_logger

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        duration_ms = (time.perf_counter() - start) * 1000
        request_logger.info(
            "request_completed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response


class SecureHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers. Compatible with Nginx/Cloudflare (they may override).
    Enable hsts only in production to avoid pinning HTTPS on local hosts.
    """

    def __init__(self, app: ASGIApp, hsts: bool = False) -> None:
        super().__init__(app)
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        # Legacy XSS auditor is disabled; modern browsers rely on CSP
        response.headers["X-XSS-Protection"] = "0"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response


def get_request_context(request: Request) -> RequestContext:
    """Dependency: context set by RequestContextMiddleware."""
    return request.state.context


RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
