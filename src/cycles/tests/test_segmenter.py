"""Tests for cycle reconstruction, period-day expansion and ongoing detection."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from src.cycles.config_loader import CycleConfig
from src.cycles.history import CycleHistory, as_history
from src.cycles.segmenter import (
    Cycle,
    all_period_day_strings,
    all_period_days,
    calendar_day,
    end_dates,
    format_day,
    has_ongoing_period,
    last_period_start,
    logged_dates,
    period_cycles,
    start_dates,
)
from src.cycles.tests.conftest import end_log, regular_history, start_log
from src.models.cycles import LogEntry


class TestStartAndEndDates:
    def test_start_dates_only_flagged_days(self) -> None:
        logs = [
            start_log(date(2024, 1, 1)),
            LogEntry(date=date(2024, 1, 2), mood="happy"),
            start_log(date(2024, 1, 29)),
        ]
        assert start_dates(logs) == [date(2024, 1, 1), date(2024, 1, 29)]

    def test_end_dates_require_non_start_day(self) -> None:
        logs = [
            LogEntry(date=date(2024, 1, 1), is_start_day=True, period_ended=True),
            end_log(date(2024, 1, 5)),
            LogEntry(date=date(2024, 1, 6), notes="Period ended"),
        ]
        # Only the structured flag counts; raw notes are read by the ingest adapter
        assert end_dates(logs) == [date(2024, 1, 5)]

    def test_logged_dates_in_input_order(self) -> None:
        logs = [LogEntry(date=date(2024, 3, 2)), LogEntry(date=date(2024, 3, 1))]
        assert logged_dates(logs) == [date(2024, 3, 2), date(2024, 3, 1)]

    def test_last_period_start(self) -> None:
        logs = [start_log(date(2024, 2, 1)), start_log(date(2024, 1, 1))]
        assert last_period_start(logs) == date(2024, 2, 1)
        assert last_period_start([]) is None


class TestPeriodCycles:
    def test_starts_without_ends_are_all_ongoing(self) -> None:
        logs = [start_log(date(2024, m, 1)) for m in (3, 1, 2)]
        cycles = period_cycles(logs)
        assert len(cycles) == 3
        assert all(c.end is None for c in cycles)
        assert [c.start for c in cycles] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]

    def test_pairs_with_first_later_end(self) -> None:
        logs = regular_history(date(2024, 1, 1), n=2)
        assert period_cycles(logs) == [
            Cycle(date(2024, 1, 1), date(2024, 1, 5)),
            Cycle(date(2024, 1, 29), date(2024, 2, 2)),
        ]

    def test_end_on_same_day_as_start_is_not_matched(self) -> None:
        logs = [start_log(date(2024, 1, 1)), end_log(date(2024, 1, 1))]
        assert period_cycles(logs) == [Cycle(date(2024, 1, 1), None)]

    def test_end_can_be_shared_by_two_starts(self) -> None:
        logs = [
            start_log(date(2024, 1, 1)),
            start_log(date(2024, 1, 3)),
            end_log(date(2024, 1, 6)),
        ]
        cycles = period_cycles(logs)
        assert [c.end for c in cycles] == [date(2024, 1, 6), date(2024, 1, 6)]

    def test_earlier_end_is_ignored(self) -> None:
        logs = [end_log(date(2023, 12, 30)), start_log(date(2024, 1, 1))]
        assert period_cycles(logs) == [Cycle(date(2024, 1, 1), None)]

    def test_end_is_never_before_start(self) -> None:
        logs = regular_history(date(2024, 1, 1), n=4) + [start_log(date(2024, 5, 1))]
        for cycle in period_cycles(logs):
            assert cycle.end is None or cycle.end > cycle.start


class TestAllPeriodDays:
    def test_terminated_cycle_expands_inclusive(self) -> None:
        logs = [start_log(date(2024, 1, 1)), end_log(date(2024, 1, 5))]
        assert all_period_days(logs) == [date(2024, 1, d) for d in range(1, 6)]

    def test_ongoing_cycle_contributes_only_start(self) -> None:
        logs = [start_log(date(2024, 1, 1))]
        assert all_period_days(logs) == [date(2024, 1, 1)]

    def test_overlapping_cycles_are_deduplicated(self) -> None:
        logs = [
            start_log(date(2024, 1, 1)),
            start_log(date(2024, 1, 3)),
            end_log(date(2024, 1, 4)),
        ]
        assert all_period_days(logs) == [date(2024, 1, d) for d in range(1, 5)]

    def test_crosses_month_boundary(self) -> None:
        logs = [start_log(date(2024, 2, 28)), end_log(date(2024, 3, 2))]
        assert all_period_day_strings(logs) == [
            "2024-02-28", "2024-02-29", "2024-03-01", "2024-03-02",
        ]

    def test_every_start_is_a_period_day(self) -> None:
        logs = regular_history(date(2024, 1, 1), n=3) + [
            start_log(date(2024, 4, 20)),
            start_log(date(2024, 4, 22)),
        ]
        days = set(all_period_days(logs))
        assert set(start_dates(logs)) <= days


class TestFormatDay:
    def test_zero_padded(self) -> None:
        assert format_day(date(2024, 3, 7)) == "2024-03-07"

    def test_datetime_input_keeps_local_day(self) -> None:
        entry = LogEntry(date=datetime(2024, 3, 7, 23, 59))
        assert format_day(entry.date) == "2024-03-07"

    def test_calendar_day(self) -> None:
        assert calendar_day(datetime(2024, 3, 7, 23, 59)) == date(2024, 3, 7)
        assert calendar_day(date(2024, 3, 7)) == date(2024, 3, 7)


class TestHasOngoingPeriod:
    def test_no_logs(self) -> None:
        assert not has_ongoing_period([], as_of=date(2024, 1, 1))

    def test_recent_unterminated_start_is_ongoing(self, cycle_config: CycleConfig) -> None:
        logs = [start_log(date(2024, 1, 1))]
        assert has_ongoing_period(logs, as_of=date(2024, 1, 3), config=cycle_config)

    def test_cutoff_after_ten_days(self, cycle_config: CycleConfig) -> None:
        logs = [start_log(date(2024, 1, 1))]
        assert has_ongoing_period(logs, as_of=date(2024, 1, 11), config=cycle_config)
        assert not has_ongoing_period(logs, as_of=date(2024, 1, 12), config=cycle_config)
        assert not has_ongoing_period(logs, as_of=date(2024, 2, 1), config=cycle_config)

    def test_end_marker_after_start_closes_period(self, cycle_config: CycleConfig) -> None:
        logs = [start_log(date(2024, 1, 1)), end_log(date(2024, 1, 4))]
        assert not has_ongoing_period(logs, as_of=date(2024, 1, 5), config=cycle_config)

    def test_end_before_latest_start_does_not_close_it(self, cycle_config: CycleConfig) -> None:
        logs = regular_history(date(2024, 1, 1), n=1) + [start_log(date(2024, 1, 29))]
        assert has_ongoing_period(logs, as_of=date(2024, 1, 30), config=cycle_config)

    def test_datetime_as_of_uses_its_calendar_day(self, cycle_config: CycleConfig) -> None:
        logs = [start_log(date(2024, 1, 1))]
        assert has_ongoing_period(logs, as_of=datetime(2024, 1, 11, 22, 0), config=cycle_config)
        assert not has_ongoing_period(logs, as_of=datetime(2024, 1, 12, 0, 5), config=cycle_config)

    def test_defaults_to_today(self) -> None:
        logs = [start_log(date.today() - timedelta(days=2))]
        assert has_ongoing_period(logs)


class TestCycleHistory:
    def test_from_logs(self) -> None:
        logs = regular_history(date(2024, 1, 1), n=2)
        history = CycleHistory.from_logs(logs)
        assert history.start_dates == (date(2024, 1, 1), date(2024, 1, 29))
        assert history.end_dates == (date(2024, 1, 5), date(2024, 2, 2))
        assert history.last_start == date(2024, 1, 29)
        assert history.is_period_day(date(2024, 1, 3))
        assert not history.is_period_day(date(2024, 1, 10))
        assert len(history.period_days) == 10

    def test_empty_history(self) -> None:
        history = CycleHistory.from_logs([])
        assert history.last_start is None
        assert history.cycles == ()

    def test_as_history_passes_through(self) -> None:
        history = CycleHistory.from_logs([start_log(date(2024, 1, 1))])
        assert as_history(history) is history
        assert as_history([start_log(date(2024, 1, 1))]) == history
