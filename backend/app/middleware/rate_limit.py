"""
Notekeep Backend: Rate Limiting Middleware
===========================================

What:  Per-IP sliding window limit on API requests.
How:   Keeps a deque of request timestamps per client address. Timestamps
       older than the window are dropped on each request; when the remaining
       count reaches the limit the request is rejected with 429 and a
       Retry-After header.

Single-process only: the counters live in this worker's memory. Multi-worker
deployments need a shared store (e.g. Redis) instead.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Limits come from settings (RATE_LIMIT_REQUESTS per RATE_LIMIT_WINDOW
    seconds) unless passed explicitly, which the tests use.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        hits = self._hits[client_ip]
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(hits),
                self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        if len(self._hits) > 1000:
            self._forget_idle(now)
        return await call_next(request)

    def _forget_idle(self, now: float) -> None:
        """Drop addresses with no requests inside the current window."""
        idle = [
            ip for ip, hits in self._hits.items()
            if not hits or hits[-1] <= now - self.window_seconds
        ]
        for ip in idle:
            del self._hits[ip]
