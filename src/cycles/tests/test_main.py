"""Tests for the cycle report entry point."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from src.cycles.ingest import entries_from_legacy
from src.main import build_report, main
from src.models.cycles import CycleSettings

ROWS = [
    {"date": "2024-01-01", "is_start_day": True},
    {"date": "2024-01-05", "is_start_day": False, "notes": "Period ended"},
    {"date": "2024-01-29", "is_start_day": True},
    {"date": "2024-02-02", "is_start_day": False, "notes": "Period ended"},
]


class TestBuildReport:
    def test_full_report(self) -> None:
        logs = entries_from_legacy(ROWS)
        report = build_report(logs, CycleSettings(), as_of=date(2024, 2, 11))
        assert report["as_of"] == "2024-02-11"
        assert report["prediction"]["date"] == "2024-02-26"
        assert report["prediction"]["days_until"] == 15
        # Feb 11 is day 14 of the cycle started Jan 29
        assert report["phase"]["day_in_cycle"] == 14
        assert report["phase"]["phase"] == "ovulatory"
        assert report["fertility"]["level"] == "High"
        assert report["ongoing_period"] is False
        assert report["averages"]["average_period_length"] == 5
        assert len(report["period_days"]) == 10

    def test_empty_logs(self) -> None:
        report = build_report([], CycleSettings(), as_of=date(2024, 2, 11))
        assert report["prediction"] is None
        assert report["phase"] is None
        assert report["fertility"]["level"] == "Unknown"


class TestMain:
    def test_prints_report(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "logs.json"
        path.write_text(json.dumps({"logs": ROWS, "settings": {"cycle_length": 30}}))
        assert main([str(path), "--as-of", "2024-02-11"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["prediction"]["avg_cycle_length"] == 28
        assert report["phase"]["cycle_length"] == 30

    def test_accepts_bare_row_list(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "logs.json"
        path.write_text(json.dumps(ROWS))
        assert main([str(path), "--as-of", "2024-02-11"]) == 0
        assert json.loads(capsys.readouterr().out)["fertility"]["level"] == "High"

    def test_missing_file_exits_2(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.json")]) == 2

    def test_invalid_rows_exit_2(self, tmp_path: Path) -> None:
        path = tmp_path / "logs.json"
        path.write_text(json.dumps([{"date": "not-a-date"}]))
        assert main([str(path)]) == 2

    @pytest.mark.parametrize(
        "payload",
        [
            {"logs": [], "settings": [28]},
            {"logs": {"a": 1}},
            ["2024-01-01"],
            {"logs": [ROWS[0], 7]},
            "just a string",
        ],
    )
    def test_badly_shaped_input_exits_2(self, tmp_path: Path, payload: object) -> None:
        path = tmp_path / "logs.json"
        path.write_text(json.dumps(payload))
        assert main([str(path)]) == 2
