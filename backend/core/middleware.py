from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


GRAPH_PATH = "/"


class GraphRateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding window limiter for GET requests of the graph.

    Clients whose window has fully expired are forgotten on the next graph
    request, so the bucket map only holds clients seen within one window.
    """

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        trust_forwarded_for: bool = True,
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.trust_forwarded_for = trust_forwarded_for
        self._client_buckets: dict[str, deque[float]] = {}
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET" or request.url.path != GRAPH_PATH:
            return await call_next(request)

        client = self._client_ip(request)
        now = monotonic()

        with self._lock:
            self._prune(now)
            bucket = self._client_buckets.setdefault(client, deque())

            if len(bucket) >= self.max_requests:
                retry_after = max(1, int(self.window_seconds - (now - bucket[0])))
                return PlainTextResponse(
                    "Too Many Requests",
                    status_code=429,
                    headers={"Retry-After": str(retry_after)},
                )

            bucket.append(now)

        return await call_next(request)

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        for client in list(self._client_buckets):
            bucket = self._client_buckets[client]
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()
            if not bucket:
                del self._client_buckets[client]

    def _client_ip(self, request: Request) -> str:
        if self.trust_forwarded_for:
            forwarded_for = request.headers.get("x-forwarded-for")
            if forwarded_for:
                return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
