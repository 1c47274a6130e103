"""
Typed config loader — parses YAML / env vars into typed domain objects.

Reads config/defaults.yaml (or the path in Settings.metrics_config_path),
then applies HABIT_METRICS_* environment overrides, and returns an
immutable MetricsConfig. A cached accessor is provided for production use.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .config import get_settings
from .typed_config import MetricsConfig, ScoreOptions, coerce_week_starts_on

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

ENV_PREFIX = "HABIT_METRICS_"

ModelT = TypeVar("ModelT", bound=BaseModel)

# ---------------------------------------------------------------------------
# Raw YAML loading helper
# ---------------------------------------------------------------------------


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.error("Config file %s is not a mapping", path)
        return {}
    return data


def _env_overrides() -> Dict[str, Any]:
    """Collect HABIT_METRICS_* variables into a metrics-section dict."""
    overrides: Dict[str, Any] = {}
    score: Dict[str, Any] = {}

    week_start = os.getenv(f"{ENV_PREFIX}WEEK_STARTS_ON")
    if week_start is not None:
        overrides["week_starts_on"] = coerce_week_starts_on(week_start)

    penalty = os.getenv(f"{ENV_PREFIX}PENALTY_FACTOR")
    if penalty is not None:
        score["penalty_factor"] = penalty

    allow_negative = os.getenv(f"{ENV_PREFIX}ALLOW_NEGATIVE_BAD")
    if allow_negative is not None:
        score["allow_negative_bad"] = allow_negative.lower() in ("1", "true", "yes")

    lookback = os.getenv(f"{ENV_PREFIX}STREAK_LOOKBACK_DAYS")
    if lookback is not None:
        overrides["streak_lookback_days"] = lookback

    if score:
        overrides["score"] = score
    return overrides


# ---------------------------------------------------------------------------
# Metrics config
# ---------------------------------------------------------------------------


def _validate_per_field(model: Type[ModelT], raw: Dict[str, Any], section: str) -> ModelT:
    """Build ``model`` from ``raw``, dropping only the fields that fail validation."""
    data = dict(raw)
    while True:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            bad = {err["loc"][0] for err in e.errors() if err["loc"]} & set(data)
            if not bad:
                logger.warning("Invalid %s config, using defaults: %s", section, e)
                return model()
            logger.warning(
                "Invalid %s values for %s, using defaults for them: %s",
                section,
                ", ".join(sorted(map(str, bad))),
                e,
            )
            for key in bad:
                data.pop(key)


def load_metrics_config(path: Optional[Path] = None) -> MetricsConfig:
    """Parse the ``metrics`` section of defaults.yaml plus env overrides.

    Invalid values are logged and replaced by their built-in defaults, one
    field at a time, instead of failing startup.
    """
    if path is None:
        configured = get_settings().metrics_config_path
        path = Path(configured) if configured else PROJECT_ROOT / "config" / "defaults.yaml"

    raw = _load_yaml(path).get("metrics", {}) or {}
    if not isinstance(raw, dict):
        raw = {}

    overrides = _env_overrides()
    score_section = raw.get("score")
    if not isinstance(score_section, dict):
        score_section = {}
    score_raw = {**score_section, **overrides.pop("score", {})}
    merged = {**raw, **overrides}
    merged.pop("score", None)

    score = _validate_per_field(ScoreOptions, score_raw, "score")
    return _validate_per_field(MetricsConfig, {**merged, "score": score}, "metrics")


# ---------------------------------------------------------------------------
# Cached singleton
# ---------------------------------------------------------------------------

_metrics_config: Optional[MetricsConfig] = None


def get_metrics_config() -> MetricsConfig:
    global _metrics_config
    if _metrics_config is None:
        _metrics_config = load_metrics_config()
    return _metrics_config


def _clear_caches() -> None:
    """Clear the cached MetricsConfig (for testing)."""
    global _metrics_config
    _metrics_config = None
