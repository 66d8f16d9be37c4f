"""Shared fixtures for throwplus tests."""

from __future__ import annotations

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted while the test runs."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
