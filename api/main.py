"""
StrikeZone API - FastAPI Application
====================================
Natural-language question answering over MLB pitching statistics.

Routes:
- POST /api/chat        question -> SQL -> rows -> answer
- GET  /, /index.html   chat front end
- GET  /health          liveness check
- OPTIONS *             permissive CORS preflight

Anything else answers 404 with a plain-text "Not found".
"""

import os
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from .routers import chat, pages  # noqa: E402
from .middleware import PermissiveCORSMiddleware, RequestLogMiddleware  # noqa: E402
from .middleware.cors import ALLOW_ORIGIN  # noqa: E402
from .models import HealthResponse  # noqa: E402


# Create FastAPI app
app = FastAPI(
    title="StrikeZone API",
    description="""
## StrikeZone - Baseball Statistics Q&A

Ask questions about MLB pitching and team records (2018-2024) in plain English.
Each question is translated into SQL by Claude, run against a read-only
Lahman Baseball Database subset, and summarized back into a short answer.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    redirect_slashes=False,
)

# Request logging runs inside the CORS layer so preflights are answered first
app.add_middleware(RequestLogMiddleware)
app.add_middleware(PermissiveCORSMiddleware)


# ============================================
# Include Routers
# ============================================

app.include_router(
    chat.router,
    prefix="/api",
    tags=["Chat"]
)

app.include_router(
    pages.router,
    tags=["Pages"]
)


# ============================================
# Root Endpoints
# ============================================

@app.get("/health", tags=["Root"], response_model=HealthResponse)
async def health():
    """Simple health check endpoint at root level."""
    return HealthResponse()


# ============================================
# Exception Handlers
# ============================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown paths and unsupported methods both answer 404 Not found."""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not found", status_code=404)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc)},
        headers={"Access-Control-Allow-Origin": ALLOW_ORIGIN}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", 8000)),
        reload=os.getenv("API_RELOAD", "false").lower() == "true"
    )
