"""Shared fixtures: silent logging and a fresh settings cache per test."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from resultcase import clear_settings_cache, configure_logging


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    """Route log output to the no-op renderer and reset cached settings."""
    clear_settings_cache()
    configure_logging(format="none")
    yield
    clear_settings_cache()
