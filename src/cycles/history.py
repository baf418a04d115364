"""Precomputed, read-only view of a log snapshot.

Phase and fertility lookups are typically run for every day of a calendar
month against the same logs.  Building a ``CycleHistory`` once and passing it
in avoids re-scanning the logs on every lookup.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from src.cycles.segmenter import (
    Cycle,
    end_dates,
    period_cycles,
    period_days_from_cycles,
    start_dates,
)
from src.models.cycles import LogEntry


@dataclass(frozen=True)
class CycleHistory:
    """Derived cycle data for one log snapshot.

    Attributes:
        start_dates: Logged period starts, ascending.
        end_dates:   Logged period ends, ascending.
        cycles:      Reconstructed cycles, ordered by start.
        period_days: Every day covered by a logged period.
    """

    start_dates: tuple[date, ...] = ()
    end_dates: tuple[date, ...] = ()
    cycles: tuple[Cycle, ...] = ()
    period_days: frozenset[date] = frozenset()

    @classmethod
    def from_logs(cls, logs: Sequence[LogEntry]) -> CycleHistory:
        cycles = period_cycles(logs)
        return cls(
            start_dates=tuple(sorted(start_dates(logs))),
            end_dates=tuple(sorted(end_dates(logs))),
            cycles=tuple(cycles),
            period_days=frozenset(period_days_from_cycles(cycles)),
        )

    @property
    def last_start(self) -> date | None:
        return self.start_dates[-1] if self.start_dates else None

    def is_period_day(self, day: date) -> bool:
        return day in self.period_days


def as_history(source: CycleHistory | Sequence[LogEntry]) -> CycleHistory:
    """Accept either a prebuilt history or a raw log snapshot."""
    if isinstance(source, CycleHistory):
        return source
    return CycleHistory.from_logs(source)
