# ===== app/api/middleware/rate_limit_middleware.py =====
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
import logging
import time

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 1.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client rate limiting on API routes.

    Clients are keyed by IP address. Counters live in process memory, so
    each worker enforces its own limit. Clients idle for a full window are
    dropped on the next sweep.
    """

    def __init__(self, app, requests_per_second: int = 10):
        super().__init__(app)
        self.requests_per_second = requests_per_second
        self.request_times = {}
        self.last_sweep = 0.0

    def _sweep(self, current_time: float):
        """Forget clients with no request inside the window"""
        stale = [
            client_id for client_id, times in self.request_times.items()
            if not times or current_time - times[-1] >= WINDOW_SECONDS
        ]
        for client_id in stale:
            del self.request_times[client_id]
        self.last_sweep = current_time

    async def dispatch(self, request: Request, call_next):
        # Only apply to API routes
        if not request.url.path.startswith("/api/v1/"):
            return await call_next(request)

        client_id = request.client.host if request.client else "unknown"
        current_time = time.time()

        if current_time - self.last_sweep >= WINDOW_SECONDS:
            self._sweep(current_time)

        # Simple sliding window: keep timestamps from the last second
        recent = [
            t for t in self.request_times.pop(client_id, [])
            if current_time - t < WINDOW_SECONDS
        ]

        # Check if rate limit exceeded
        if len(recent) >= self.requests_per_second:
            self.request_times[client_id] = recent
            logger.warning(f"Rate limit exceeded for {client_id} on {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded. Too many requests per second."},
                headers={"Retry-After": "1"}
            )

        # Add current request timestamp
        recent.append(current_time)
        self.request_times[client_id] = recent

        return await call_next(request)
