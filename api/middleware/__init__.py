"""
StrikeZone API Middleware Package
=================================

FastAPI middleware for cross-cutting concerns.
"""

from .cors import PermissiveCORSMiddleware
from .request_log import RequestLogMiddleware

__all__ = ["PermissiveCORSMiddleware", "RequestLogMiddleware"]
