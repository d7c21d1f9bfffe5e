"""Column Profiler — Pytest Configuration & Fixtures.

Provides:
1. Settings built from defaults, isolated from the developer's environment.
2. Sample columns used across the service tests.
3. Provider factories for orchestrator tests.

Usage:
    def test_something(orchestrator_factory, example_column):
        orchestrator = orchestrator_factory({"col": example_column})
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

import pytest

from config import ProfilingSettings, QualitySettings, Settings, get_settings
from services.column_provider import InMemoryColumnProvider
from services.data_profiler_service import ProfilingOrchestrator

PROFILER_ENV_PREFIXES = ("PROFILER_", "QUALITY_", "LOG_")


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop PROFILER_/QUALITY_/LOG_ overrides and the cached settings."""
    import os

    for key in list(os.environ):
        if key.startswith(PROFILER_ENV_PREFIXES) or key == "ENVIRONMENT":
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def profiling_settings() -> ProfilingSettings:
    return ProfilingSettings()


@pytest.fixture
def quality_settings() -> QualitySettings:
    return QualitySettings()


# =============================================================================
# Sample columns
# =============================================================================

@pytest.fixture
def example_column() -> list[int]:
    """Ten rows, three distinct values with counts 3 / 2 / 5."""
    return [1, 1, 1, 2, 2, 3, 3, 3, 3, 3]


@pytest.fixture
def mostly_null_column() -> list[Any]:
    """100 rows, 95 of them null."""
    return [None] * 95 + ["a", "b", "c", "d", "e"]


@pytest.fixture
def text_column() -> list[str]:
    return ["INV-001", "INV-002", "INV-003", "PO-1", "INV-001"]


# =============================================================================
# Orchestrator factories
# =============================================================================

@pytest.fixture
def orchestrator_factory(settings) -> Callable[..., ProfilingOrchestrator]:
    """Build an orchestrator over in-memory columns."""

    def _create(
        columns: Mapping[str, Sequence[Any]],
        *,
        settings_override: Settings | None = None,
    ) -> ProfilingOrchestrator:
        provider = InMemoryColumnProvider(columns)
        return ProfilingOrchestrator(provider, settings=settings_override or settings)

    return _create
