# StrikeZone API Response Models
# =============================
"""Pydantic models for API responses."""

from pydantic import BaseModel, Field
from typing import List, Dict, Any


class ChatResponse(BaseModel):
    """Successful chat answer."""
    success: bool = True
    message: str = Field(..., description="Natural-language answer")
    sql: str = Field(..., description="Statement that was executed")
    results: List[Dict[str, Any]] = Field(default_factory=list, description="Result rows")


class ChatFailure(BaseModel):
    """Pipeline failure (HTTP 500)."""
    success: bool = False
    error: str


class InputError(BaseModel):
    """Malformed request body (HTTP 400)."""
    error: str


class HealthResponse(BaseModel):
    """Health check payload."""
    status: str = "healthy"
    service: str = "strikezone-api"
