"""
Blog List Backend — Rate Limiting Middleware
==============================================

What:  Per-IP sliding window rate limiter.
Why:   Login and registration hash passwords with bcrypt, which is
       deliberately slow; unbounded request rates would let one client
       exhaust the CPU and brute-force credentials.
How:   Keeps a deque of request timestamps per IP on the middleware instance.
       Only the credential routes (POST /api/login, POST /api/users) count;
       reading and editing blogs is never throttled.

Algorithm: Sliding Window Log
    1. Drop timestamps older than the window from the IP's deque
    2. If the remaining count >= limit, reject with 429
    3. Otherwise record the current timestamp and let the request through

State is per process. Multiple workers each enforce the limit on their own.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, FrozenSet, Iterable, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from bloglist.config import settings
from bloglist.exceptions import RateLimitExceededError
from bloglist.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

# Sweep idle IPs after this many requests
CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Configuration (from settings):
        rate_limit_requests: Max requests per window (default: 100)
        rate_limit_window: Window duration in seconds (default: 3600)

    Only requests whose (method, path) is in `limited_routes` are counted.
    """

    LIMITED_ROUTES: FrozenSet[Tuple[str, str]] = frozenset({
        ("POST", "/api/login"),
        ("POST", "/api/users"),
    })

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        limited_routes: Optional[Iterable[Tuple[str, str]]] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self.limited_routes = (
            frozenset(limited_routes) if limited_routes is not None else self.LIMITED_ROUTES
        )
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if (request.method, request.url.path.rstrip("/")) not in self.limited_routes:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window_start = now - self.window_seconds

        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window_seconds,
            )
            # Raised exceptions never reach FastAPI's handlers from here,
            # so the error body is rendered in place
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(exc.retry_after)},
            )

        timestamps.append(now)

        self._seen += 1
        if self._seen % CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs whose newest request has left the window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
