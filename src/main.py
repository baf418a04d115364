"""Cyclewise report entry point.

Reads a JSON export of period log rows and prints the cycle summary the app's
cycle screen shows: next period, today's phase and fertility, ongoing flag and
personal averages.

Run locally:
    python -m src.main logs.json --as-of 2026-02-23

The input is either a list of log rows or an object with ``logs`` and an
optional ``settings`` mapping (``cycle_length``, ``period_length``).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from src.config import get_settings
from src.cycles.config_loader import ConfigValidationError, get_cycle_config
from src.cycles.fertility import pregnancy_chances
from src.cycles.history import CycleHistory
from src.cycles.ingest import entries_from_legacy
from src.cycles.phase import phase_for_date, phase_insight
from src.cycles.predictor import cycle_averages, next_period_prediction
from src.cycles.segmenter import format_day, has_ongoing_period
from src.models.cycles import CycleSettings, LogEntry

logger = logging.getLogger("cyclewise")


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_report(
    logs: Sequence[LogEntry],
    settings: CycleSettings | None = None,
    as_of: date | None = None,
) -> dict:
    """Assemble the cycle summary for ``as_of`` (defaults to today)."""
    config = get_cycle_config()
    settings = settings or config.default_settings()
    today = as_of or date.today()
    history = CycleHistory.from_logs(logs)

    prediction = next_period_prediction(logs, settings, today, config)
    phase = phase_for_date(today, history, settings, config)
    fertility = pregnancy_chances(today, history, settings, config)
    averages = cycle_averages(logs, settings, config)

    phase_block = None
    if phase is not None:
        insight = phase_insight(phase, settings, config)
        phase_block = {
            "phase": phase.phase.value,
            "name": insight.name,
            "day_in_cycle": phase.day_in_cycle,
            "cycle_length": phase.cycle_length,
            "days_remaining": insight.days_remaining,
            "energy_level": insight.energy_level.value,
            "recommended_exercises": insight.recommended_exercises,
        }

    return {
        "as_of": format_day(today),
        "prediction": prediction.as_dict() if prediction else None,
        "phase": phase_block,
        "fertility": {
            "level": fertility.level.value,
            "description": fertility.description,
        },
        "ongoing_period": has_ongoing_period(logs, today, config),
        "period_days": [format_day(d) for d in sorted(history.period_days)],
        "averages": {
            "average_cycle_length": averages.average_cycle_length,
            "average_period_length": averages.average_period_length,
            "cycles_used": averages.cycles_used,
            "periods_used": averages.periods_used,
        },
    }


def _read_input(path: Path) -> tuple[list[LogEntry], CycleSettings | None]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, list):
        return _read_rows(payload), None
    if not isinstance(payload, dict):
        raise ValueError("expected a list of log rows or an object with 'logs'")

    settings_raw = payload.get("settings")
    if settings_raw is not None and not isinstance(settings_raw, dict):
        raise ValueError("'settings' must be an object")
    settings = CycleSettings(**settings_raw) if settings_raw else None
    return _read_rows(payload.get("logs", [])), settings


def _read_rows(rows: object) -> list[LogEntry]:
    if not isinstance(rows, list):
        raise ValueError("'logs' must be a list of row objects")
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ValueError(f"log row {index} is not an object")
    return entries_from_legacy(rows)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print a cycle summary from exported period logs.")
    parser.add_argument("logs", type=Path, help="JSON file of period log rows")
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="Reference date (YYYY-MM-DD)")
    parser.add_argument("--log-level", default=None, help="Override CYCLEWISE_LOG_LEVEL")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    try:
        logs, settings = _read_input(args.logs)
        report = build_report(logs, settings, args.as_of)
    except (OSError, ValueError, ValidationError, ConfigValidationError) as exc:
        logger.error("Could not build cycle report from %s: %s", args.logs, exc)
        return 2

    logger.info("Built cycle report from %d log entries", len(logs))
    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
