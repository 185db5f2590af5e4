"""
StrikeZone Pages Router
=======================
Serves the single-page chat front end at / and /index.html.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
INDEX_PATH = STATIC_DIR / "index.html"


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
@router.get("/index.html", response_class=HTMLResponse, include_in_schema=False)
async def index():
    """Chat front end."""
    return HTMLResponse(INDEX_PATH.read_text(encoding="utf-8"))
