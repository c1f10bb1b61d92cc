"""Shared fixtures for hub CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from hub_management.config import get_config


@pytest.fixture(autouse=True)
def isolate_cli_state() -> Iterator[None]:
    """Restore root logging handlers and drop cached configuration after each command."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    get_config.cache_clear()
    yield
    root.handlers = handlers
    root.setLevel(level)
    get_config.cache_clear()
