"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``SENTIMENT_ADVISOR_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Relative ``[data]`` paths and ``logging.log_file`` resolve against the project
root (the directory holding ``pyproject.toml``), so the CLI behaves the same
from any working directory.

The aggregator, metrics calculator, recommendation engine and CLI all receive
an ``AppConfig`` (or one of its sections) — thresholds are never read from
env vars or inline literals scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class SentimentConfig(BaseModel):
    """Sentiment aggregation window, trend detection and optional jitter.

    ``jitter_*`` settings control the "live feel" perturbation.  Jitter is off
    by default so aggregation is fully deterministic; when enabled with a
    ``jitter_seed`` it is reproducible across runs.
    """

    model_config = ConfigDict(frozen=True)

    window_size: int = 50
    trend_window: int = 10
    trend_threshold: float = 0.1
    label_threshold: float = 0.5
    jitter_enabled: bool = False
    jitter_magnitude: float = 0.04
    jitter_inverse_ratio: float = 0.6
    jitter_seed: Optional[int] = None

    @field_validator("window_size", "trend_window")
    @classmethod
    def validate_positive_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Window sizes must be >= 1, got {v}.")
        return v

    @field_validator("jitter_magnitude")
    @classmethod
    def validate_jitter_magnitude(cls, v: float) -> float:
        if not 0.0 <= v <= 0.04:
            raise ValueError(f"jitter_magnitude must be in [0.0, 0.04], got {v}.")
        return v

    @field_validator("jitter_inverse_ratio", "label_threshold", "trend_threshold")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Value must be in [0.0, 1.0], got {v}.")
        return v


class RecommendationConfig(BaseModel):
    """Thresholds shared by every rule in the recommendation cascade.

    These are the tunable "model": sentiment strength cut-offs, the
    overweight position limit, and the confidence cut-offs for priority
    buckets.  Per-rule profit/loss bands live beside the rules themselves.
    """

    model_config = ConfigDict(frozen=True)

    overweight_pct: float = 25.0
    strong_sentiment: float = 0.55
    moderate_sentiment: float = 0.45
    high_priority_confidence: float = 80.0
    medium_priority_confidence: float = 65.0

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "RecommendationConfig":
        if not 0.0 <= self.moderate_sentiment < self.strong_sentiment <= 1.0:
            raise ValueError(
                "Sentiment thresholds must satisfy 0 <= moderate_sentiment < "
                f"strong_sentiment <= 1, got {self.moderate_sentiment} / "
                f"{self.strong_sentiment}."
            )
        if self.medium_priority_confidence > self.high_priority_confidence:
            raise ValueError(
                "medium_priority_confidence must be <= high_priority_confidence."
            )
        if not 0.0 < self.overweight_pct <= 100.0:
            raise ValueError(
                f"overweight_pct must be in (0, 100], got {self.overweight_pct}."
            )
        return self


class DataConfig(BaseModel):
    """Filesystem paths for input snapshots and generated reports."""

    model_config = ConfigDict(frozen=True)

    snapshot_path: str = "config/examples/demo_snapshot.json"
    output_dir: str = "data/outputs/recommendations"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/advisor.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.  Tests build it
    directly (``AppConfig()`` gives the committed defaults).
    """

    model_config = ConfigDict(frozen=True)

    sentiment: SentimentConfig = SentimentConfig()
    recommendation: RecommendationConfig = RecommendationConfig()
    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply SENTIMENT_ADVISOR_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Anchor relative file paths at the project root, not the cwd
    raw = _resolve_paths(raw, root)

    # 5. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _env_flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SENTIMENT_ADVISOR_* env vars to the raw config dict.

    Supported overrides:
      SENTIMENT_ADVISOR_LOG_LEVEL       → raw["logging"]["level"]
      SENTIMENT_ADVISOR_OUTPUT_DIR      → raw["data"]["output_dir"]
      SENTIMENT_ADVISOR_SNAPSHOT_PATH   → raw["data"]["snapshot_path"]
      SENTIMENT_ADVISOR_JITTER_ENABLED  → raw["sentiment"]["jitter_enabled"]
      SENTIMENT_ADVISOR_DEBUG           → raw["debug"]
    """
    if log_level := os.environ.get("SENTIMENT_ADVISOR_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if output_dir := os.environ.get("SENTIMENT_ADVISOR_OUTPUT_DIR"):
        raw.setdefault("data", {})["output_dir"] = output_dir

    if snapshot_path := os.environ.get("SENTIMENT_ADVISOR_SNAPSHOT_PATH"):
        raw.setdefault("data", {})["snapshot_path"] = snapshot_path

    if jitter := os.environ.get("SENTIMENT_ADVISOR_JITTER_ENABLED"):
        raw.setdefault("sentiment", {})["jitter_enabled"] = _env_flag(jitter)

    if debug := os.environ.get("SENTIMENT_ADVISOR_DEBUG"):
        raw["debug"] = _env_flag(debug)

    return raw


def _resolve_paths(raw: dict[str, Any], root: Path) -> dict[str, Any]:
    """Rewrite relative data and log paths (including defaults) under ``root``.

    Empty values are left alone; an empty ``log_file`` disables file logging.
    """
    for section, model, keys in (
        ("data", DataConfig, ("snapshot_path", "output_dir")),
        ("logging", LoggingConfig, ("log_file",)),
    ):
        values = raw.setdefault(section, {})
        for key in keys:
            value = values.get(key, model.model_fields[key].default)
            if value and not Path(value).is_absolute():
                values[key] = str(root / value)
    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    # Flatten top-level keys that may be nested under [project]
    project = raw.pop("project", {})

    return AppConfig(
        sentiment=SentimentConfig(**raw.get("sentiment", {})),
        recommendation=RecommendationConfig(**raw.get("recommendation", {})),
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
