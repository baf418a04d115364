"""Pydantic models for period log entries and user cycle settings.

These are the records the log store hands to the cycle analytics engine.
Legacy rows that still encode fields inside ``notes`` are converted by
``src.cycles.ingest`` before they reach the engine.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import Field, field_validator

from src.models.base import CyclewiseBase


# ---------- Enums ----------

class CyclePhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"


class EnergyLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Severity(str, Enum):
    mild = "mild"
    moderate = "moderate"
    severe = "severe"


class FertilityLevelName(str, Enum):
    very_low = "Very Low"
    low = "Low"
    medium = "Medium"
    high = "High"
    unknown = "Unknown"


# ---------- Log entries ----------

class LogEntry(CyclewiseBase):
    """One logged calendar day.

    ``date`` is a timezone-naive local calendar date.  A ``datetime`` is
    reduced to its own year/month/day, never shifted through UTC.
    """

    date: date
    is_start_day: bool = False
    period_ended: bool = False
    notes: str | None = None
    mood: str | None = None
    symptoms: list[str] = Field(default_factory=list)
    energy_level: EnergyLevel | None = None
    severity: Severity | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value: object) -> object:
        if isinstance(value, datetime):
            return value.date()
        return value

    @field_validator("symptoms", mode="before")
    @classmethod
    def _none_symptoms(cls, value: object) -> object:
        return [] if value is None else value


# ---------- Settings ----------

class CycleSettings(CyclewiseBase):
    """User-level baseline used when logged history is insufficient."""

    cycle_length: int = Field(default=28, ge=1, le=90)
    period_length: int = Field(default=5, ge=1, le=15)
