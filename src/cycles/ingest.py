"""Convert legacy period-log rows into structured ``LogEntry`` records.

Legacy rows encode three things inside ``notes``:

- the last day of a period, as the substring ``"Period ended"`` on a non-start
  row;
- the energy level, as ``"Energy: <low|medium|high> | ..."``;
- the symptom severity, as ``"Severity: <mild|moderate|severe> | ..."``.

This is the only place those conventions are interpreted.  The analytics read
``period_ended``, ``energy_level`` and ``severity`` directly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.note_fields import parse_energy, parse_severity
from src.models.cycles import LogEntry

logger = logging.getLogger("cyclewise.cycles.ingest")

_LEGACY_KEYS = ("date", "is_start_day", "notes", "mood", "symptoms")


def entry_from_legacy(
    record: Mapping[str, Any], config: CycleConfig | None = None
) -> LogEntry:
    """Build a LogEntry from one legacy row.

    Unknown keys (flow intensity, row ids, timestamps) are ignored.  ``notes``
    is kept verbatim.

    Raises:
        pydantic.ValidationError: If the row's date or field types are invalid.
    """
    marker = (config or get_cycle_config()).segmentation.end_marker
    data = {key: record.get(key) for key in _LEGACY_KEYS if record.get(key) is not None}

    notes = data.get("notes")
    is_start = bool(data.get("is_start_day", False))
    energy, _ = parse_energy(notes)
    severity, _ = parse_severity(notes)

    return LogEntry(
        **data,
        period_ended=bool(notes) and not is_start and marker in notes,
        energy_level=energy,
        severity=severity,
    )


def entries_from_legacy(
    records: Iterable[Mapping[str, Any]], config: CycleConfig | None = None
) -> list[LogEntry]:
    """Convert a batch of legacy rows, preserving order."""
    config = config or get_cycle_config()
    entries = [entry_from_legacy(record, config) for record in records]
    logger.debug(
        "Converted %d legacy rows (%d period ends)",
        len(entries), sum(1 for e in entries if e.period_ended),
    )
    return entries
