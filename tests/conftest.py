"""Pytest configuration and shared fixtures for bright tests.

This module provides:
- Project root on sys.path so tests run without an install
- Isolation from BRIGHT_* environment overrides
- Event bus and monitor fixtures
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Configuration
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent

sys.path.insert(0, str(PROJECT_ROOT))

from bright import RecomputeMonitor, SimpleEventBus  # noqa: E402


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item]
) -> None:
    """Auto-apply markers based on test name."""
    for item in items:
        if "property" in item.name.lower():
            item.add_marker(pytest.mark.property)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BRIGHT_* variables from the developer's shell out of tests."""
    for name in (
        "BRIGHT_CONFIG",
        "BRIGHT_IDENTITY_FAST_PATH",
        "BRIGHT_EMIT_EVENTS",
        "BRIGHT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Event Fixtures
# =============================================================================

@pytest.fixture
def event_bus() -> SimpleEventBus:
    return SimpleEventBus()


@pytest.fixture
def monitor(event_bus: SimpleEventBus) -> RecomputeMonitor:
    return RecomputeMonitor().attach(event_bus)
