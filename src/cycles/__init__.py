"""Cyclewise menstrual cycle analytics.

Pure functions over a snapshot of period log entries.  Nothing here performs
I/O or keeps state between calls; the only shared object is the read-only
cycle config loaded from ``cycle_config.yaml``.

Modules:
    config_loader  Load/validate/reload cycle_config.yaml
    ingest         Convert legacy notes-encoded rows into LogEntry records
    segmenter      Reconstruct period cycles and covered days
    history        Precomputed CycleHistory view of a log snapshot
    predictor      Next-period prediction and personal averages
    phase          Phase classification for a date
    fertility      Pregnancy-likelihood level for a date
    note_fields    Mood / symptom details with energy and severity
"""

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.fertility import FertilityLevel, pregnancy_chances
from src.cycles.history import CycleHistory
from src.cycles.ingest import entries_from_legacy, entry_from_legacy
from src.cycles.note_fields import MoodData, SymptomData, mood_for_date, symptoms_for_date
from src.cycles.phase import PhaseInsight, PhaseResult, phase_for_date, phase_insight
from src.cycles.predictor import (
    CycleAverages,
    Prediction,
    cycle_averages,
    next_period_prediction,
)
from src.cycles.segmenter import (
    Cycle,
    all_period_days,
    end_dates,
    format_day,
    has_ongoing_period,
    period_cycles,
    start_dates,
)

__all__ = [
    "CycleConfig",
    "get_cycle_config",
    "Cycle",
    "CycleHistory",
    "start_dates",
    "end_dates",
    "period_cycles",
    "all_period_days",
    "has_ongoing_period",
    "format_day",
    "Prediction",
    "CycleAverages",
    "next_period_prediction",
    "cycle_averages",
    "PhaseResult",
    "PhaseInsight",
    "phase_for_date",
    "phase_insight",
    "FertilityLevel",
    "pregnancy_chances",
    "MoodData",
    "SymptomData",
    "mood_for_date",
    "symptoms_for_date",
    "entry_from_legacy",
    "entries_from_legacy",
]
