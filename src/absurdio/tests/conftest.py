"""Shared fixtures: fresh settings and silent global logging for every test."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from absurdio.foundation.config import clear_settings_cache
from absurdio.runtime.observability import BoundLogger, MemoryRenderer, configure_logging


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from ABSURDIO_* variables of the host environment."""
    for key in list(os.environ):
        if key.startswith("ABSURDIO_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def quiet_logs() -> Iterator[None]:
    configure_logging("none")
    yield
    configure_logging("none")


@pytest.fixture
def memory() -> MemoryRenderer:
    return MemoryRenderer()


@pytest.fixture
def log(memory: MemoryRenderer) -> BoundLogger:
    """Logger that records every entry into ``memory``."""
    return BoundLogger(_renderer=memory)
