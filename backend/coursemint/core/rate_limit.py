"""In-memory rate limiting middleware.

Limits (production only):
  /auth/*                      → 10 requests/minute per IP
  POST /courses/{id}/certificate → 5 requests/day per session

Single-instance only; there is no shared store.
"""

import time
from collections import defaultdict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from coursemint.core.auth import SESSION_TOKEN_HEADER

# (path prefix or suffix, max_requests, window_seconds)
_IP_RULES: list[tuple[str, int, int]] = [
    ("/auth/", 10, 60),
]

_SESSION_RULES: list[tuple[str, int, int]] = [
    ("/certificate", 5, 86400),
]


class SlidingWindowCounter:
    """Per-key hit timestamps, pruned to the window on each check."""

    def __init__(self) -> None:
        self._hits: dict[str, list[float]] = defaultdict(list)

    def is_allowed(self, key: str, max_requests: int, window: int) -> bool:
        now = time.monotonic()
        cutoff = now - window
        self._hits[key] = hits = [t for t in self._hits[key] if t > cutoff]
        if len(hits) >= max_requests:
            return False
        hits.append(now)
        return True


_ip_counter = SlidingWindowCounter()
_session_counter = SlidingWindowCounter()


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        from coursemint.config import settings
        if not settings.is_production:
            return await call_next(request)

        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        for prefix, max_req, window in _IP_RULES:
            if path.startswith(prefix):
                key = f"ip:{client_ip}:{prefix}"
                if not _ip_counter.is_allowed(key, max_req, window):
                    return _rate_limit_response(request)

        token = request.headers.get(SESSION_TOKEN_HEADER)
        if token and request.method == "POST":
            for suffix, max_req, window in _SESSION_RULES:
                if path.endswith(suffix):
                    key = f"session:{token}:{suffix}"
                    if not _session_counter.is_allowed(key, max_req, window):
                        return _rate_limit_response(request)

        return await call_next(request)


def _rate_limit_response(request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=429,
        content={
            "error": True,
            "status_code": 429,
            "detail": "Rate limit exceeded. Please try again later.",
            "request_id": request_id,
        },
        headers={"Retry-After": "60"},
    )
