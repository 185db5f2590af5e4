# StrikeZone - Input Guard
# =======================
"""
Input Guard
===========
Checks the shape of an inbound chat payload before any model or database
work happens. A rejected payload is a client error (HTTP 400), never a
server fault.

This is STEP 1 of the pipeline.
"""

import logging
from typing import Any

from .errors import ClientInputError

logger = logging.getLogger(__name__)


class InputGuard:
    """
    Validates the inbound request body.

    Accepts a JSON object whose ``message`` field is a non-empty string and
    returns that string verbatim.

    Example:
        guard = InputGuard()
        question = guard.check({"message": "Who had the lowest ERA in 2023?"})
    """

    MESSAGE_FIELD = "message"
    REJECTION_MESSAGE = "Invalid message"

    def check(self, payload: Any) -> str:
        """
        Validate a decoded request body.

        Args:
            payload: Decoded JSON body

        Returns:
            The question string

        Raises:
            ClientInputError: If the body is not an object, lacks the message
                field, or the message is not a non-empty string
        """
        if not isinstance(payload, dict):
            logger.warning(f"Rejected payload of type {type(payload).__name__}")
            raise ClientInputError(self.REJECTION_MESSAGE)

        message = payload.get(self.MESSAGE_FIELD)

        if not isinstance(message, str) or not message:
            logger.warning(f"Rejected message field of type {type(message).__name__}")
            raise ClientInputError(self.REJECTION_MESSAGE)

        return message

    def is_valid(self, payload: Any) -> bool:
        """Quick check without raising."""
        try:
            self.check(payload)
            return True
        except ClientInputError:
            return False
