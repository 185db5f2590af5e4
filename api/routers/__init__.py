"""
StrikeZone API Routers
"""

from . import chat, pages

__all__ = ["chat", "pages"]
