"""Rate limiting middleware for the public proxy endpoints.

In-memory sliding window per client IP. The translation proxy forwards to a
third-party service with its own quota, so only the configured path prefixes
are limited. State lives in one process; run a single worker or put a shared
limiter in front when scaling out.
"""

import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP rate limiting middleware.

    Args:
        app: The ASGI application.
        rate_limit: Max requests allowed in the window.
        window_seconds: Time window in seconds.
        protected_paths: Path prefixes to limit. If empty, all paths are.
        trust_forwarded: Key clients by X-Forwarded-For. Only enable behind a
            proxy that overwrites the header; otherwise callers can rotate it.
        clock: Time source, seconds as float.
    """

    def __init__(
        self,
        app,
        rate_limit: int = 30,
        window_seconds: int = 60,
        protected_paths: Optional[List[str]] = None,
        trust_forwarded: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.rate_limit = rate_limit
        self.window_seconds = window_seconds
        self.protected_paths = protected_paths or []
        self.trust_forwarded = trust_forwarded
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._next_sweep = float("-inf")

    def _is_protected(self, path: str) -> bool:
        if not self.protected_paths:
            return True
        return any(path.startswith(prefix) for prefix in self.protected_paths)

    def client_ip(self, request: Request) -> str:
        """The socket peer, or the first X-Forwarded-For hop behind a trusted proxy."""
        if self.trust_forwarded:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _sweep(self, now: float) -> None:
        """Forget every client with no hit inside the current window."""
        cutoff = now - self.window_seconds
        stale = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for ip in stale:
            del self._hits[ip]
        self._next_sweep = now + self.window_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self._is_protected(request.url.path):
            return await call_next(request)

        ip = self.client_ip(request)
        now = self.clock()
        if now >= self._next_sweep:
            self._sweep(now)

        hits = self._hits.get(ip)
        if hits is not None:
            while hits and hits[0] <= now - self.window_seconds:
                hits.popleft()
            if not hits:
                self._hits.pop(ip, None)
                hits = None

        if hits is not None and len(hits) >= self.rate_limit:
            retry_after = int(self.window_seconds - (now - hits[0])) + 1
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Rate limit exceeded. Please slow down.",
                    "retry_after_seconds": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )

        self._hits.setdefault(ip, deque()).append(now)
        return await call_next(request)
