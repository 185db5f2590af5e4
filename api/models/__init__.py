# StrikeZone API Models
"""Request and response schemas."""

from .requests import ChatRequest
from .responses import ChatResponse, ChatFailure, InputError, HealthResponse

__all__ = ["ChatRequest", "ChatResponse", "ChatFailure", "InputError", "HealthResponse"]
