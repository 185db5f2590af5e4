# StrikeZone API Package
"""
HTTP surface for StrikeZone: chat endpoint, static front end, health check.
"""
