"""Load and validate the Cyclewise cycle analytics configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  It is loaded
once on first use and cached.  Call ``reload_cycle_config()`` to re-read from
disk.  Set ``CYCLEWISE_CYCLE_CONFIG_PATH`` to point at a different file.

Usage::

    from src.cycles.config_loader import get_cycle_config

    config = get_cycle_config()
    config.prediction.max_gap_days        # 35
    config.fertility_band(14).level       # FertilityLevelName.high
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from src.config import get_settings
from src.models.cycles import CycleSettings, FertilityLevelName

logger = logging.getLogger("cyclewise.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class DefaultsConfig:
    """Baseline used when the caller passes no CycleSettings."""

    cycle_length: int = 28
    period_length: int = 5


@dataclass
class SegmentationConfig:
    """Cycle reconstruction settings."""

    end_marker: str = "Period ended"
    ongoing_cutoff_days: int = 10


@dataclass
class PredictionConfig:
    """Next-period prediction settings."""

    min_gap_days: int = 21
    max_gap_days: int = 35
    rolling_window: int = 5
    luteal_length_days: int = 14
    fertile_window_days: int = 6
    irregular_std_days: float = 7.0


@dataclass
class PhaseConfig:
    """Fixed day thresholds for phase classification."""

    follicular_end_day: int = 13
    ovulatory_end_day: int = 16


@dataclass
class FertilityBand:
    """One band of the day-in-cycle → fertility partition.

    ``max_day`` of None means the band is open-ended.
    """

    max_day: int | None
    level: FertilityLevelName
    description: str


@dataclass
class CycleConfig:
    """Complete, validated cycle analytics configuration.

    Attributes:
        version:      Config schema version string.
        defaults:     Fallback cycle and period lengths.
        segmentation: Cycle reconstruction settings.
        prediction:   Gap filtering, rolling window, fertile window.
        phase:        Phase classification thresholds.
        bands:        Ordered fertility bands.
    """

    version: str
    defaults: DefaultsConfig
    segmentation: SegmentationConfig
    prediction: PredictionConfig
    phase: PhaseConfig
    bands: list[FertilityBand]
    _raw: dict = field(default_factory=dict, repr=False)

    def default_settings(self) -> CycleSettings:
        """CycleSettings built from the ``defaults`` section."""
        return CycleSettings(
            cycle_length=self.defaults.cycle_length,
            period_length=self.defaults.period_length,
        )

    def fertility_band(self, day_in_cycle: int) -> FertilityBand:
        """Return the first band covering ``day_in_cycle``.

        Falls back to the last band when no bounded band matches.
        """
        for band in self.bands:
            if band.max_day is None or day_in_cycle <= band.max_day:
                return band
        return self.bands[-1]


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return data


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Every section is optional; missing keys take the dataclass defaults.
    All problems are collected and reported in a single error.

    Raises:
        ConfigValidationError: If any value is missing a valid type or range.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, name: str, default: int, minimum: int = 1) -> int:
        value = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{name}.{key} must be an integer, got {value!r}")
            return default
        if number < minimum:
            errors.append(f"{name}.{key} = {number} must be >= {minimum}")
        return number

    def _section(key: str) -> dict:
        section = raw.get(key) or {}
        if not isinstance(section, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return section

    version = str(raw.get("version", "1.0"))

    # ── Defaults ──
    d_raw = _section("defaults")
    defaults = DefaultsConfig(
        cycle_length=_int(d_raw, "cycle_length", "defaults", 28),
        period_length=_int(d_raw, "period_length", "defaults", 5),
    )

    # ── Segmentation ──
    s_raw = _section("segmentation")
    end_marker = s_raw.get("end_marker", "Period ended")
    if not isinstance(end_marker, str) or not end_marker.strip():
        errors.append("segmentation.end_marker must be a non-empty string")
        end_marker = "Period ended"
    segmentation = SegmentationConfig(
        end_marker=end_marker,
        ongoing_cutoff_days=_int(s_raw, "ongoing_cutoff_days", "segmentation", 10, 0),
    )

    # ── Prediction ──
    p_raw = _section("prediction")
    try:
        irregular_std = float(p_raw.get("irregular_std_days", 7.0))
    except (TypeError, ValueError):
        errors.append("prediction.irregular_std_days must be a number")
        irregular_std = 7.0
    prediction = PredictionConfig(
        min_gap_days=_int(p_raw, "min_gap_days", "prediction", 21),
        max_gap_days=_int(p_raw, "max_gap_days", "prediction", 35),
        rolling_window=_int(p_raw, "rolling_window", "prediction", 5),
        luteal_length_days=_int(p_raw, "luteal_length_days", "prediction", 14),
        fertile_window_days=_int(p_raw, "fertile_window_days", "prediction", 6),
        irregular_std_days=irregular_std,
    )
    if prediction.min_gap_days > prediction.max_gap_days:
        errors.append(
            f"prediction.min_gap_days ({prediction.min_gap_days}) exceeds "
            f"max_gap_days ({prediction.max_gap_days})"
        )

    # ── Phase thresholds ──
    ph_raw = _section("phase")
    phase = PhaseConfig(
        follicular_end_day=_int(ph_raw, "follicular_end_day", "phase", 13),
        ovulatory_end_day=_int(ph_raw, "ovulatory_end_day", "phase", 16),
    )
    if phase.follicular_end_day >= phase.ovulatory_end_day:
        errors.append("phase.follicular_end_day must be below phase.ovulatory_end_day")

    # ── Fertility bands ──
    bands_raw = _section("fertility").get("bands") or []
    bands: list[FertilityBand] = []
    previous_max = 0
    for i, band_raw in enumerate(bands_raw):
        if not isinstance(band_raw, dict):
            errors.append(f"fertility.bands[{i}] must be a mapping")
            continue
        try:
            level = FertilityLevelName(band_raw.get("level"))
        except ValueError:
            errors.append(f"fertility.bands[{i}].level {band_raw.get('level')!r} is not a known level")
            continue
        max_day = band_raw.get("max_day")
        if max_day is not None:
            max_day = _int(band_raw, "max_day", f"fertility.bands[{i}]", 0)
            if max_day <= previous_max:
                errors.append(f"fertility.bands[{i}].max_day must increase, got {max_day}")
            previous_max = max_day
        elif i != len(bands_raw) - 1:
            errors.append(f"fertility.bands[{i}] has no max_day but is not the last band")
        bands.append(
            FertilityBand(
                max_day=max_day,
                level=level,
                description=str(band_raw.get("description", "")),
            )
        )
    if not bands:
        errors.append("'fertility.bands' is missing or empty")

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        defaults=defaults,
        segmentation=segmentation,
        prediction=prediction,
        phase=phase,
        bands=bands,
        _raw=raw,
    )


def _default_path() -> Path:
    override = get_settings().cycle_config_path
    return Path(override) if override else _CONFIG_PATH


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the configured or bundled file by default.

    Returns:
        Validated CycleConfig instance.
    """
    target = path or _default_path()
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Shared config used when an analytics call is not handed one
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Config used by segmenter, predictor, phase and fertility calls made
    without an explicit ``config``.

    Read from ``CYCLEWISE_CYCLE_CONFIG_PATH`` or the bundled YAML the first
    time it is needed, then shared by every thread.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Re-read cycle thresholds and swap them in for later analytics calls.

    The new file is fully validated first; a bad file leaves the current
    thresholds in place and raises ``ConfigValidationError`` (or
    ``FileNotFoundError``).
    """
    global _config
    fresh = load_cycle_config(path)
    with _config_lock:
        previous, _config = _config, fresh
    logger.info(
        "Cycle thresholds reloaded (version %s -> %s)",
        previous.version if previous else "unset",
        fresh.version,
    )
    return fresh
