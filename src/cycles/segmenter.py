"""Period cycle reconstruction from raw log entries.

A cycle is a logged period start paired with the first logged period end that
falls strictly after it.  Ends are matched greedily and independently for each
start, so two starts with no end between them share the same end date.  A start
with no later end is an ongoing cycle (``end is None``).

All dates are timezone-naive local calendar dates.  ``format_day`` builds the
``YYYY-MM-DD`` form from year/month/day components only.
"""

from __future__ import annotations

import bisect
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.models.cycles import LogEntry

logger = logging.getLogger("cyclewise.cycles.segmenter")


@dataclass(frozen=True)
class Cycle:
    """One reconstructed period.

    Attributes:
        start: First logged day of the period.
        end:   Logged last day, or None while the period is ongoing.
    """

    start: date
    end: date | None = None

    @property
    def is_ongoing(self) -> bool:
        return self.end is None

    def days(self) -> list[date]:
        """Every calendar day the period covers (only ``start`` when ongoing)."""
        if self.end is None:
            return [self.start]
        span = (self.end - self.start).days
        return [self.start + timedelta(days=i) for i in range(span + 1)]


def format_day(day: date) -> str:
    """Render a calendar date as ``YYYY-MM-DD`` without any timezone handling."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def calendar_day(value: date) -> date:
    """Reduce a datetime to its calendar date; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def logged_dates(logs: Sequence[LogEntry]) -> list[date]:
    """Every logged date, in input order."""
    return [log.date for log in logs]


def start_dates(logs: Sequence[LogEntry]) -> list[date]:
    """Dates flagged as the first day of a period, in input order."""
    return [log.date for log in logs if log.is_start_day]


def end_dates(logs: Sequence[LogEntry]) -> list[date]:
    """Dates flagged as the last day of a period, in input order."""
    return [log.date for log in logs if not log.is_start_day and log.period_ended]


def last_period_start(logs: Sequence[LogEntry]) -> date | None:
    """Most recent period start date, or None if nothing was logged."""
    starts = start_dates(logs)
    return max(starts) if starts else None


def period_cycles(logs: Sequence[LogEntry]) -> list[Cycle]:
    """Pair each start date with the first end date strictly after it.

    Returns:
        One Cycle per logged start, ordered by start date.
    """
    starts = sorted(start_dates(logs))
    ends = sorted(end_dates(logs))

    cycles: list[Cycle] = []
    for start in starts:
        idx = bisect.bisect_right(ends, start)
        cycles.append(Cycle(start=start, end=ends[idx] if idx < len(ends) else None))
    return cycles


def period_days_from_cycles(cycles: Sequence[Cycle]) -> list[date]:
    """Union of the days covered by ``cycles``, de-duplicated and sorted."""
    days: set[date] = set()
    for cycle in cycles:
        days.update(cycle.days())
    return sorted(days)


def all_period_days(logs: Sequence[LogEntry]) -> list[date]:
    """Every day covered by a logged period, ascending.

    Terminated cycles expand from start to end inclusive; ongoing cycles
    contribute only their start day.
    """
    return period_days_from_cycles(period_cycles(logs))


def all_period_day_strings(logs: Sequence[LogEntry]) -> list[str]:
    """``all_period_days`` rendered as ``YYYY-MM-DD`` strings."""
    return [format_day(d) for d in all_period_days(logs)]


def has_ongoing_period(
    logs: Sequence[LogEntry],
    as_of: date | None = None,
    config: CycleConfig | None = None,
) -> bool:
    """Return True if the most recent period has started but not ended.

    A period with no logged end stops counting as ongoing once more than
    ``segmentation.ongoing_cutoff_days`` whole days have passed since it
    started, so a forgotten end log never stays open indefinitely.

    Args:
        logs:   Log snapshot.
        as_of:  Reference date (defaults to today).
        config: Cycle config (defaults to the global singleton).
    """
    last_start = last_period_start(logs)
    if last_start is None:
        return False

    ended = any(
        log.date >= last_start and not log.is_start_day and log.period_ended
        for log in logs
    )
    if ended:
        return False

    cutoff = (config or get_cycle_config()).segmentation.ongoing_cutoff_days
    elapsed = (calendar_day(as_of or date.today()) - last_start).days
    if elapsed > cutoff:
        logger.debug(
            "Period started %s has no end after %d days; treating as closed",
            last_start, elapsed,
        )
        return False
    return True
