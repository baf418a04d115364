"""Shared fixtures and log builders for cycle analytics tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.cycles.config_loader import CycleConfig, load_cycle_config
from src.models.cycles import CycleSettings, LogEntry


# ---------------------------------------------------------------------------
# Log builders
# ---------------------------------------------------------------------------


def start_log(d: date, **kwargs) -> LogEntry:
    return LogEntry(date=d, is_start_day=True, **kwargs)


def end_log(d: date, **kwargs) -> LogEntry:
    return LogEntry(date=d, period_ended=True, **kwargs)


def regular_history(
    first_start: date, n: int, cycle_length: int = 28, period_length: int = 5
) -> list[LogEntry]:
    """n regular periods, each with a logged end ``period_length`` days in."""
    logs: list[LogEntry] = []
    for i in range(n):
        start = first_start + timedelta(days=i * cycle_length)
        logs.append(start_log(start))
        logs.append(end_log(start + timedelta(days=period_length - 1)))
    return logs


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the bundled cycle config for tests."""
    return load_cycle_config()


@pytest.fixture
def settings() -> CycleSettings:
    return CycleSettings(cycle_length=28, period_length=5)
