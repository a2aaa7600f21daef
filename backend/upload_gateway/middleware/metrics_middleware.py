"""
ASGI middleware for tracking HTTP request metrics.
Records request count, duration, and errors.
"""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from upload_gateway.utils.metrics import http_requests_total, http_request_duration_seconds, errors_total

# Only known routes are used as label values; anything else is grouped
KNOWN_PATHS = {"/", "/upload", "/health"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Process request and record metrics."""
        start_time = time.time()

        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = self._normalize_path(request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            errors_total.labels(error_type="exception").inc()
            raise

        status_code = response.status_code
        http_requests_total.labels(
            method=method,
            path=path,
            status=status_code
        ).inc()

        duration = time.time() - start_time
        http_request_duration_seconds.labels(
            method=method,
            path=path
        ).observe(duration)

        # Track errors (4xx and 5xx)
        if status_code >= 400:
            errors_total.labels(error_type=f"{status_code // 100}xx").inc()

        return response

    def _normalize_path(self, path: str) -> str:
        """Collapse unknown paths to keep label cardinality bounded."""
        return path if path in KNOWN_PATHS else "other"
