# Tests for Input Guard
"""
Test Suite for Input Guard
==========================
Payload shape checks done before any model or database work.
"""

import pytest

from core.engine.errors import ClientInputError
from core.engine.input_guard import InputGuard


class TestAcceptedPayloads:
    """Payloads the guard lets through."""

    def setup_method(self):
        self.guard = InputGuard()

    @pytest.mark.parametrize("message", [
        "Who had the lowest ERA in 2023?",
        "x",
        "   ",
        "How many wins did the Yankees have in 2024?" * 20,
    ])
    def test_non_empty_string_accepted(self, message):
        """Any non-empty string is returned verbatim."""
        assert self.guard.check({"message": message}) == message

    def test_extra_fields_ignored(self):
        """Unknown fields do not affect acceptance."""
        payload = {"message": "Top strikeouts 2019", "conversation_id": "abc"}
        assert self.guard.check(payload) == "Top strikeouts 2019"


class TestRejectedPayloads:
    """Payloads rejected as client errors."""

    def setup_method(self):
        self.guard = InputGuard()

    @pytest.mark.parametrize("payload", [
        {},
        {"message": ""},
        {"message": None},
        {"message": 42},
        {"message": ["Who had the lowest ERA?"]},
        {"msg": "Who had the lowest ERA?"},
        ["message"],
        "Who had the lowest ERA?",
        None,
    ])
    def test_rejected(self, payload):
        """Missing, empty or non-string messages raise ClientInputError."""
        with pytest.raises(ClientInputError) as exc_info:
            self.guard.check(payload)
        assert exc_info.value.message == "Invalid message"
        assert exc_info.value.stage == "input"

    def test_is_valid(self):
        """is_valid mirrors check without raising."""
        assert self.guard.is_valid({"message": "ERA leaders"}) is True
        assert self.guard.is_valid({"message": ""}) is False
        assert self.guard.is_valid(None) is False
