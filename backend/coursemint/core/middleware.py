"""Middleware: request ID injection, structured access logging."""

import hashlib
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("coursemint.access")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Inject a unique request ID into each request and response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured access log: request_id, learner (hashed), endpoint, status."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000

        request_id = getattr(request.state, "request_id", "-")
        user_id_raw = getattr(request.state, "user_id", None)
        learner = hash_user_id(user_id_raw) if user_id_raw else "-"

        logger.info(
            "request_id=%s learner=%s method=%s path=%s status=%d elapsed_ms=%.1f",
            request_id,
            learner,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def hash_user_id(uid) -> str:
    """First 12 hex chars of SHA-256, so access logs never carry raw ids."""
    return hashlib.sha256(str(uid).encode()).hexdigest()[:12]
