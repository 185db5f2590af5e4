# StrikeZone API Request Models
# ============================
"""Pydantic models for API requests."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Chat request body (documentation schema; the body is checked by InputGuard)."""
    message: str = Field(..., min_length=1, description="Natural-language baseball question")
