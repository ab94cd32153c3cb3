"""Root conftest — shared test configuration."""

import os

import pytest

from revertible.config import get_settings

# Pin the defaults so a developer's environment cannot change guard behavior
os.environ.setdefault("REVERTIBLE_FINALIZER_UNDO", "true")
os.environ.setdefault("REVERTIBLE_LOG_FORMAT", "json")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are lru_cached; each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
