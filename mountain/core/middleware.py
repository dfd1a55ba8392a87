from collections import defaultdict
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

import structlog

logger = structlog.get_logger()

PROTECTED_PREFIX = "/mountain/me"


class RenderRateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window limiter for the GitHub-backed render routes."""

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        protected_prefix: str = PROTECTED_PREFIX,
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.protected_prefix = protected_prefix
        # One queue of request timestamps per client key.
        self._buckets: dict[str, deque[float]] = defaultdict(deque)
        self._lock = RLock()
        self._last_prune = monotonic()

    def is_protected(self, request: Request) -> bool:
        return request.method == "GET" and request.url.path.startswith(self.protected_prefix)

    def prune_idle(self, now: float) -> int:
        """Drop clients with no request inside the window; returns how many."""

        cutoff = now - self.window_seconds
        with self._lock:
            idle = [
                key
                for key, bucket in self._buckets.items()
                if not bucket or bucket[-1] <= cutoff
            ]
            for key in idle:
                del self._buckets[key]
            self._last_prune = now
        return len(idle)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not self.is_protected(request):
            return await call_next(request)

        client = self._client_key(request)
        now = monotonic()
        if now - self._last_prune >= self.window_seconds:
            self.prune_idle(now)

        with self._lock:
            bucket = self._buckets[client]
            cutoff = now - self.window_seconds
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()

            if len(bucket) >= self.max_requests:
                retry_after = max(1, int(self.window_seconds - (now - bucket[0])))
                logger.warning(
                    "Render rate limit exceeded",
                    client=client,
                    path=request.url.path,
                    retry_after=retry_after,
                )
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Too Many Requests"},
                    headers={"Retry-After": str(retry_after)},
                )

            bucket.append(now)

        return await call_next(request)

    @staticmethod
    def _client_key(request: Request) -> str:
        # Reverse proxies put the original client first in X-Forwarded-For.
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
