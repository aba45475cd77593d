"""Pytest configuration for API tests."""

import pytest

from app.api.room_handler import RoomHandler
from app.services.room_registry import RoomRegistry


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def registry():
    """Create an empty room registry for a single test."""
    return RoomRegistry()


@pytest.fixture
def room_handler(registry):
    """Create a room handler bound to the test registry."""
    return RoomHandler(registry)
