"""Qualitative pregnancy-likelihood estimate for a queried date.

Uses the day-in-cycle from ``phase_for_date`` and its own banding (see
``fertility.bands`` in cycle_config.yaml).  The bands are deliberately
separate from the phase thresholds: day 12 is already "High" here while the
phase classifier still calls it follicular.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.history import CycleHistory
from src.cycles.phase import phase_for_date
from src.models.cycles import CycleSettings, FertilityLevelName, LogEntry


@dataclass
class FertilityLevel:
    level: FertilityLevelName
    description: str


UNKNOWN_FERTILITY = FertilityLevel(level=FertilityLevelName.unknown, description="No cycle data")


def pregnancy_chances(
    target: date,
    source: CycleHistory | Sequence[LogEntry],
    settings: CycleSettings | None = None,
    config: CycleConfig | None = None,
) -> FertilityLevel:
    """Return the fertility level for ``target``, or Unknown without cycle data."""
    config = config or get_cycle_config()
    result = phase_for_date(target, source, settings, config)
    if result is None:
        return FertilityLevel(UNKNOWN_FERTILITY.level, UNKNOWN_FERTILITY.description)

    band = config.fertility_band(result.day_in_cycle)
    return FertilityLevel(level=band.level, description=band.description)
