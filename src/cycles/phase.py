"""Cycle phase classification for a queried date.

The day-in-cycle is counted from the most recent logged period start,
regardless of where the queried date sits.  Dates before that start have no
phase.  Dates past one full cycle only get a phase if they are themselves
logged period days, in which case the day count wraps modulo the cycle length.

Phase boundaries are fixed day numbers (follicular ends on day 13, ovulatory on
day 16 by default) and are not scaled to the user's cycle length.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.history import CycleHistory, as_history
from src.cycles.segmenter import calendar_day
from src.models.cycles import CyclePhase, CycleSettings, EnergyLevel, LogEntry

PHASE_NAMES: dict[CyclePhase, str] = {
    CyclePhase.menstrual: "Menstrual Phase",
    CyclePhase.follicular: "Follicular Phase",
    CyclePhase.ovulatory: "Ovulatory Phase",
    CyclePhase.luteal: "Luteal Phase",
}

PHASE_ENERGY: dict[CyclePhase, EnergyLevel] = {
    CyclePhase.menstrual: EnergyLevel.low,
    CyclePhase.follicular: EnergyLevel.high,
    CyclePhase.ovulatory: EnergyLevel.high,
    CyclePhase.luteal: EnergyLevel.medium,
}

PHASE_EXERCISES: dict[CyclePhase, list[str]] = {
    CyclePhase.menstrual: [
        "Gentle yoga", "Light walking", "Stretching", "Meditation", "Restorative yoga",
    ],
    CyclePhase.follicular: [
        "Cardio workouts", "Strength training", "High-intensity workouts",
        "Running", "Weight lifting", "New activities",
    ],
    CyclePhase.ovulatory: [
        "High-intensity training", "Group fitness", "Challenging workouts",
        "Outdoor activities", "Competitive sports", "Dance classes",
    ],
    CyclePhase.luteal: [
        "Moderate strength training", "Pilates", "Swimming", "Yoga",
        "Walking", "Low-intensity cardio",
    ],
}


@dataclass
class PhaseResult:
    """Phase of a single queried date.

    Attributes:
        phase:        Cycle phase.
        day_in_cycle: 1-based day, wrapped into [1, cycle_length].
        cycle_length: Cycle length the day was wrapped against.
    """

    phase: CyclePhase
    day_in_cycle: int
    cycle_length: int


@dataclass
class PhaseInsight:
    """Display details for a phase: name, time left, energy, suggested training."""

    phase: CyclePhase
    name: str
    day_in_cycle: int
    days_remaining: int
    energy_level: EnergyLevel
    recommended_exercises: list[str] = field(default_factory=list)


def classify_day(
    day_in_cycle: int, period_length: int, config: CycleConfig | None = None
) -> CyclePhase:
    """Map a normalized day-in-cycle to its phase."""
    thresholds = (config or get_cycle_config()).phase
    if day_in_cycle <= period_length:
        return CyclePhase.menstrual
    if day_in_cycle <= thresholds.follicular_end_day:
        return CyclePhase.follicular
    if day_in_cycle <= thresholds.ovulatory_end_day:
        return CyclePhase.ovulatory
    return CyclePhase.luteal


def phase_for_date(
    target: date,
    source: CycleHistory | Sequence[LogEntry],
    settings: CycleSettings | None = None,
    config: CycleConfig | None = None,
) -> PhaseResult | None:
    """Return the cycle phase of ``target``.

    Args:
        target:   Date to classify.
        source:   Prebuilt CycleHistory or a raw log snapshot.
        settings: User cycle/period length (defaults to configured defaults).
        config:   Cycle config (defaults to the global singleton).

    Returns:
        PhaseResult, or None when no start is logged, ``target`` precedes the
        most recent start, or ``target`` is beyond the current cycle and not a
        logged period day.
    """
    config = config or get_cycle_config()
    settings = settings or config.default_settings()
    history = as_history(source)
    target = calendar_day(target)

    last_start = history.last_start
    if last_start is None:
        return None

    cycle_length = settings.cycle_length
    days_since_start = (target - last_start).days + 1
    if days_since_start <= 0:
        return None
    if days_since_start > cycle_length and not history.is_period_day(target):
        return None

    day_in_cycle = ((days_since_start - 1) % cycle_length) + 1
    return PhaseResult(
        phase=classify_day(day_in_cycle, settings.period_length, config),
        day_in_cycle=day_in_cycle,
        cycle_length=cycle_length,
    )


def phase_insight(
    result: PhaseResult,
    settings: CycleSettings | None = None,
    config: CycleConfig | None = None,
) -> PhaseInsight:
    """Expand a PhaseResult into display details.

    ``days_remaining`` counts the queried day itself, so the last day of a
    phase has one day remaining.
    """
    config = config or get_cycle_config()
    settings = settings or config.default_settings()
    thresholds = config.phase
    day = result.day_in_cycle

    phase_end = {
        CyclePhase.menstrual: settings.period_length,
        CyclePhase.follicular: thresholds.follicular_end_day,
        CyclePhase.ovulatory: thresholds.ovulatory_end_day,
        CyclePhase.luteal: result.cycle_length,
    }[result.phase]

    return PhaseInsight(
        phase=result.phase,
        name=PHASE_NAMES[result.phase],
        day_in_cycle=day,
        days_remaining=max(1, phase_end - day + 1),
        energy_level=PHASE_ENERGY[result.phase],
        recommended_exercises=list(PHASE_EXERCISES[result.phase]),
    )
