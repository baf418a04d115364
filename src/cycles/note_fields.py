"""Mood and symptom details for a calendar day.

Older log rows store the energy level and symptom severity inside the free-text
``notes`` field, e.g. ``"Energy: high | slept badly"`` or
``"Severity: moderate | cramps after lunch"``.  Newer rows carry structured
``energy_level`` / ``severity`` fields.  The parsers here read the legacy
encoding and strip it so only the user's own text is shown.  Notes that don't
match the encoding are passed through untouched.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from src.cycles.segmenter import calendar_day
from src.models.cycles import EnergyLevel, LogEntry, Severity

_ENERGY_RE = re.compile(r"Energy:\s*(high|medium|low)\b")
_SEVERITY_RE = re.compile(r"Severity:\s*(mild|moderate|severe)\b")

# Same fields plus an optional " | " separator, for stripping
_ENERGY_FIELD_RE = re.compile(r"Energy:\s*(?:high|medium|low)\b\s*(?:\|\s*)?")
_SEVERITY_FIELD_RE = re.compile(r"Severity:\s*(?:mild|moderate|severe)\b\s*(?:\|\s*)?")


@dataclass
class MoodData:
    mood: str
    energy_level: EnergyLevel
    notes: str | None = None


@dataclass
class SymptomData:
    symptoms: list[str] = field(default_factory=list)
    severity: Severity | None = None
    notes: str | None = None


def _remaining(text: str) -> str | None:
    text = text.strip()
    return text or None


def parse_energy(notes: str | None) -> tuple[EnergyLevel | None, str | None]:
    """Split ``"Energy: <level> | <text>"`` notes into level and user text.

    Any severity sub-field is stripped too, since mood and symptom logs for the
    same day share one notes string.

    Returns:
        (level, user_notes).  Level is None and notes are returned unchanged
        when no energy field is present.
    """
    if not notes:
        return None, notes
    match = _ENERGY_RE.search(notes)
    if match is None:
        return None, notes
    text = _ENERGY_FIELD_RE.sub("", notes, count=1)
    text = _SEVERITY_FIELD_RE.sub("", text, count=1)
    return EnergyLevel(match.group(1)), _remaining(text)


def parse_severity(notes: str | None) -> tuple[Severity | None, str | None]:
    """Split ``"Severity: <level> | <text>"`` notes into severity and user text.

    Returns:
        (severity, user_notes).  Severity is None and notes are returned
        unchanged when no severity field is present.
    """
    if not notes:
        return None, notes
    match = _SEVERITY_RE.search(notes)
    if match is None:
        return None, notes
    text = _SEVERITY_FIELD_RE.sub("", notes, count=1)
    return Severity(match.group(1)), _remaining(text)


def mood_for_date(target: date, logs: Sequence[LogEntry]) -> MoodData | None:
    """Mood, energy and user notes logged on ``target``, if any.

    Energy comes from the structured field, then the notes encoding, and
    defaults to medium.
    """
    target = calendar_day(target)
    entry = next((log for log in logs if log.date == target and log.mood), None)
    if entry is None:
        return None

    parsed, notes = parse_energy(entry.notes)
    return MoodData(
        mood=entry.mood,
        energy_level=entry.energy_level or parsed or EnergyLevel.medium,
        notes=notes,
    )


def symptoms_for_date(target: date, logs: Sequence[LogEntry]) -> SymptomData | None:
    """Symptoms, severity and user notes logged on ``target``, if any."""
    target = calendar_day(target)
    entry = next((log for log in logs if log.date == target and log.symptoms), None)
    if entry is None:
        return None

    parsed, notes = parse_severity(entry.notes)
    return SymptomData(
        symptoms=list(entry.symptoms),
        severity=entry.severity or parsed,
        notes=notes,
    )
