"""
Request Logging Middleware
==========================

Logs method, path, status code and duration for every API request.
"""

import os
import time
import logging
from typing import Optional, Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all API requests.

    Features:
    - Logs request method, path, status code, duration
    - Logs client address (honours X-Forwarded-For behind a proxy)
    - Excludes configurable paths (health checks)
    """

    # Paths to exclude from logging
    EXCLUDED_PATHS: Set[str] = {
        "/health",
        "/favicon.ico",
    }

    # Enable/disable request logging
    ENABLED: bool = os.getenv("LOG_API_REQUESTS", "true").lower() == "true"

    def __init__(self, app, exclude_paths: Optional[Set[str]] = None):
        super().__init__(app)
        if exclude_paths:
            self.EXCLUDED_PATHS = self.EXCLUDED_PATHS.union(exclude_paths)

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process the request and log it."""
        path = request.url.path
        if not self.ENABLED or path in self.EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.time()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"{request.method} {path} -> {status_code} "
                f"({duration_ms}ms, client={self._get_client_ip(request)})"
            )

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
