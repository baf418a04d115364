"""Next-period prediction from logged start-to-start gaps.

Algorithm:
1. Sort every logged period start and take the gap in days between each
   consecutive pair.
2. Discard gaps outside the plausible range (21–35 days by default).  These
   come from missed or duplicated start logs, not real cycle lengths.
3. Average the most recent gaps (up to 5 by default), rounding half up.  With
   no usable gap, fall back to the user's configured cycle length.
4. Project forward from the most recent start.

Confidence, irregularity and the fertile window follow the same rules as the
wearable cycle tracker: confidence blends how many gaps were available with
how regular they are; ovulation sits a fixed luteal length before the next
period and the fertile window ends on the ovulation day.
"""

from __future__ import annotations

import bisect
import logging
import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.segmenter import format_day, period_cycles, start_dates
from src.models.cycles import CycleSettings, LogEntry

logger = logging.getLogger("cyclewise.cycles.predictor")


@dataclass
class Prediction:
    """Prediction for the user's next period.

    Attributes:
        date:                   Predicted first day of the next period.
        days_until:             Days from the reference date (negative if overdue).
        avg_cycle_length:       Rounded mean of the gaps used, or the baseline.
        cycles_used:            Number of historical gaps that contributed.
        predicted_period_dates: ``period_length`` consecutive days from ``date``.
        std_cycle_length:       Sample standard deviation of the gaps used.
        confidence:             0.0–1.0 prediction confidence.
        is_irregular:           True if the gaps vary by more than the threshold.
        ovulation_date:         Estimated ovulation before the predicted period.
        fertile_window_start:   First day of the fertile window.
        fertile_window_end:     Last day of the fertile window (ovulation day).
    """

    date: date
    days_until: int
    avg_cycle_length: int
    cycles_used: int
    predicted_period_dates: list[date] = field(default_factory=list)
    std_cycle_length: float = 0.0
    confidence: float = 0.0
    is_irregular: bool = False
    ovulation_date: date | None = None
    fertile_window_start: date | None = None
    fertile_window_end: date | None = None

    def as_dict(self) -> dict:
        """JSON-ready representation with ``YYYY-MM-DD`` dates."""

        def _fmt(d: date | None) -> str | None:
            return format_day(d) if d is not None else None

        return {
            "date": format_day(self.date),
            "days_until": self.days_until,
            "avg_cycle_length": self.avg_cycle_length,
            "cycles_used": self.cycles_used,
            "predicted_period_dates": [format_day(d) for d in self.predicted_period_dates],
            "std_cycle_length": self.std_cycle_length,
            "confidence": self.confidence,
            "is_irregular": self.is_irregular,
            "ovulation_date": _fmt(self.ovulation_date),
            "fertile_window_start": _fmt(self.fertile_window_start),
            "fertile_window_end": _fmt(self.fertile_window_end),
        }


@dataclass
class CycleAverages:
    """Personal averages for the cycle overview card."""

    average_cycle_length: int
    average_period_length: int
    cycles_used: int = 0
    periods_used: int = 0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def start_gaps(starts: Sequence[date]) -> list[int]:
    """Day gaps between consecutive starts, after sorting ascending."""
    ordered = sorted(starts)
    return [(b - a).days for a, b in zip(ordered, ordered[1:])]


def valid_recent_gaps(starts: Sequence[date], config: CycleConfig) -> list[int]:
    """Plausible start-to-start gaps, most recent ``rolling_window`` only."""
    pc = config.prediction
    valid: list[int] = []
    for gap in start_gaps(starts):
        if pc.min_gap_days <= gap <= pc.max_gap_days:
            valid.append(gap)
        else:
            logger.debug(
                "Ignoring %d-day gap outside [%d, %d]",
                gap, pc.min_gap_days, pc.max_gap_days,
            )
    return valid[-pc.rolling_window:]


def _days_until(target: date, reference: date | datetime) -> int:
    if isinstance(reference, datetime):
        # Wall-clock comparison against local midnight of the target day
        delta = datetime.combine(target, time.min) - reference.replace(tzinfo=None)
        return math.ceil(delta.total_seconds() / 86400)
    return (target - reference).days


def next_period_prediction(
    logs: Sequence[LogEntry],
    settings: CycleSettings | None = None,
    reference_date: date | datetime | None = None,
    config: CycleConfig | None = None,
) -> Prediction | None:
    """Predict the next period start from the logged history.

    Args:
        logs:           Log snapshot.
        settings:       User baseline (defaults to the configured defaults).
        reference_date: Date or naive datetime to count ``days_until`` from
                        (defaults to now).
        config:         Cycle config (defaults to the global singleton).

    Returns:
        Prediction, or None if no period start has ever been logged.
    """
    config = config or get_cycle_config()
    settings = settings or config.default_settings()
    pc = config.prediction

    starts = start_dates(logs)
    if not starts:
        return None

    gaps = valid_recent_gaps(starts, config)
    cycles_used = len(gaps)

    if gaps:
        avg_length = _round_half_up(statistics.mean(gaps))
        std_length = statistics.stdev(gaps) if len(gaps) > 1 else 0.0
        data_confidence = min(cycles_used / pc.rolling_window, 1.0)
        regularity_confidence = max(0.2, 1.0 - (std_length / 14.0))
        confidence = round(data_confidence * 0.5 + regularity_confidence * 0.5, 2)
    else:
        logger.debug(
            "No usable cycle gaps in %d starts; using baseline %d days",
            len(starts), settings.cycle_length,
        )
        avg_length = settings.cycle_length
        std_length = 0.0
        confidence = 0.1

    next_start = max(starts) + timedelta(days=avg_length)
    ovulation = next_start - timedelta(days=pc.luteal_length_days)

    return Prediction(
        date=next_start,
        days_until=_days_until(next_start, reference_date or datetime.now()),
        avg_cycle_length=avg_length,
        cycles_used=cycles_used,
        predicted_period_dates=[
            next_start + timedelta(days=i) for i in range(settings.period_length)
        ],
        std_cycle_length=round(std_length, 1),
        confidence=confidence,
        is_irregular=std_length > pc.irregular_std_days,
        ovulation_date=ovulation,
        fertile_window_start=ovulation - timedelta(days=pc.fertile_window_days - 1),
        fertile_window_end=ovulation,
    )


def cycle_averages(
    logs: Sequence[LogEntry],
    settings: CycleSettings | None = None,
    config: CycleConfig | None = None,
) -> CycleAverages:
    """Average cycle length and period length from the logged history.

    Cycle length uses the same gaps as ``next_period_prediction``.  Period
    length averages the inclusive span of every terminated period whose end
    comes before the next logged start; a start with no end of its own would
    otherwise borrow the following period's end.  Either falls back to
    ``settings`` when nothing qualifies.
    """
    config = config or get_cycle_config()
    settings = settings or config.default_settings()

    starts = start_dates(logs)
    gaps = valid_recent_gaps(starts, config)
    ordered = sorted(set(starts))
    spans = [
        (cycle.end - cycle.start).days + 1
        for cycle in period_cycles(logs)
        if cycle.end is not None
        and bisect.bisect_right(ordered, cycle.end) == bisect.bisect_right(ordered, cycle.start)
    ]

    return CycleAverages(
        average_cycle_length=(
            _round_half_up(statistics.mean(gaps)) if gaps else settings.cycle_length
        ),
        average_period_length=(
            _round_half_up(statistics.mean(spans)) if spans else settings.period_length
        ),
        cycles_used=len(gaps),
        periods_used=len(spans),
    )
