"""
Pytest configuration for record-view.

Provides:
- a clean settings cache and environment for every test
- sample records built from `sample_models`
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Generator

import pytest

from record_view.config import Settings, get_settings
from sample_models import Product, Reading

_ENV_VARS = (
    "RECORD_VIEW_DEFAULT_SELECTION",
    "RECORD_VIEW_FIELD_SEPARATOR",
    "LOG_LEVEL",
    "LOG_JSON",
    "BENCH_ITERATIONS",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Isolate tests from the caller's environment and the settings cache.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(Path(__file__).parent)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    return get_settings()


@pytest.fixture
def product() -> Product:
    return Product(id="a1", name="Widget", tags=["x", "y"])


@pytest.fixture
def reading() -> Reading:
    return Reading(sensor_id="s-7", value=21.5, taken_at=datetime(2024, 5, 1, 12, 30))
