"""
CORS Middleware
===============

Permissive cross-origin handling for the public read-only demo.

- OPTIONS on any path is answered directly: 200, empty body, preflight headers
- Every other response gets ``Access-Control-Allow-Origin: *``
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


ALLOW_ORIGIN = "*"
ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type"

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": ALLOW_METHODS,
    "Access-Control-Allow-Headers": ALLOW_HEADERS,
}


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Answers preflight requests and stamps the allow-origin header."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=PREFLIGHT_HEADERS)

        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = ALLOW_ORIGIN
        return response
