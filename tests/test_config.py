"""
Tests for sentiment_advisor/config.py.

What we test
------------
- AppConfig() defaults match the committed thresholds.
- load_config(): TOML values, local.toml merge, missing file error,
  relative paths anchored at the project root.
- SENTIMENT_ADVISOR_* environment overrides.
- Validation of threshold ordering, jitter magnitude and log level.
- The committed config/default.toml loads cleanly.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sentiment_advisor.config import (
    AppConfig,
    LoggingConfig,
    RecommendationConfig,
    SentimentConfig,
    _find_project_root,
    load_config,
)

_ENV_VARS = (
    "SENTIMENT_ADVISOR_LOG_LEVEL",
    "SENTIMENT_ADVISOR_OUTPUT_DIR",
    "SENTIMENT_ADVISOR_SNAPSHOT_PATH",
    "SENTIMENT_ADVISOR_JITTER_ENABLED",
    "SENTIMENT_ADVISOR_DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_toml(directory: Path, text: str, name: str = "app.toml") -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_recommendation_thresholds(self):
        cfg = AppConfig().recommendation
        assert cfg.overweight_pct == 25.0
        assert cfg.strong_sentiment == 0.55
        assert cfg.moderate_sentiment == 0.45
        assert cfg.high_priority_confidence == 80.0
        assert cfg.medium_priority_confidence == 65.0

    def test_sentiment_defaults(self):
        cfg = AppConfig().sentiment
        assert cfg.window_size == 50
        assert cfg.trend_window == 10
        assert cfg.trend_threshold == 0.1
        assert cfg.jitter_enabled is False

    def test_committed_default_toml_loads(self):
        config = load_config()
        assert config.recommendation == RecommendationConfig()
        assert config.data.snapshot_path.endswith("demo_snapshot.json")


class TestLoadConfig:
    def test_values_from_toml(self, tmp_path):
        path = _write_toml(
            tmp_path,
            """
[project]
debug = true

[sentiment]
window_size = 20

[recommendation]
strong_sentiment = 0.6
moderate_sentiment = 0.4

[logging]
level = "debug"
""",
        )
        config = load_config(path)
        assert config.debug is True
        assert config.sentiment.window_size == 20
        assert config.recommendation.strong_sentiment == 0.6
        assert config.logging.level == "DEBUG"
        # Untouched sections keep their defaults
        assert config.data.output_dir == str(_find_project_root() / "data/outputs/recommendations")

    def test_local_toml_overrides(self, tmp_path):
        path = _write_toml(tmp_path, "[sentiment]\nwindow_size = 20\ntrend_window = 5\n")
        _write_toml(tmp_path, "[sentiment]\nwindow_size = 30\n", name="local.toml")
        config = load_config(path)
        assert config.sentiment.window_size == 30
        assert config.sentiment.trend_window == 5

    def test_relative_paths_resolve_against_project_root(self, tmp_path):
        path = _write_toml(
            tmp_path, '[data]\nsnapshot_path = "snap.json"\n[logging]\nlog_file = "logs/a.log"\n'
        )
        config = load_config(path)
        root = _find_project_root()
        assert config.data.snapshot_path == str(root / "snap.json")
        assert config.logging.log_file == str(root / "logs/a.log")

    def test_empty_log_file_stays_disabled(self, tmp_path):
        config = load_config(_write_toml(tmp_path, '[logging]\nlog_file = ""\n'))
        assert config.logging.log_file == ""

    def test_default_snapshot_found_from_any_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert Path(config.data.snapshot_path).is_file()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_values_raise(self, tmp_path):
        path = _write_toml(
            tmp_path, "[recommendation]\nstrong_sentiment = 0.4\nmoderate_sentiment = 0.5\n"
        )
        with pytest.raises(ValidationError, match="moderate_sentiment"):
            load_config(path)


class TestEnvOverrides:
    def test_env_beats_toml(self, tmp_path, monkeypatch):
        path = _write_toml(tmp_path, '[logging]\nlevel = "INFO"\n')
        monkeypatch.setenv("SENTIMENT_ADVISOR_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("SENTIMENT_ADVISOR_OUTPUT_DIR", "/tmp/reports")
        monkeypatch.setenv("SENTIMENT_ADVISOR_SNAPSHOT_PATH", "/tmp/snap.json")
        config = load_config(path)
        assert config.logging.level == "WARNING"
        assert config.data.output_dir == "/tmp/reports"
        assert config.data.snapshot_path == "/tmp/snap.json"

    @pytest.mark.parametrize("value, expected", [("true", True), ("1", True), ("no", False)])
    def test_boolean_flags(self, tmp_path, monkeypatch, value, expected):
        path = _write_toml(tmp_path, "")
        monkeypatch.setenv("SENTIMENT_ADVISOR_JITTER_ENABLED", value)
        monkeypatch.setenv("SENTIMENT_ADVISOR_DEBUG", value)
        config = load_config(path)
        assert config.sentiment.jitter_enabled is expected
        assert config.debug is expected


class TestValidation:
    def test_moderate_must_be_below_strong(self):
        with pytest.raises(ValidationError):
            RecommendationConfig(strong_sentiment=0.45, moderate_sentiment=0.45)

    def test_priority_cutoffs_ordered(self):
        with pytest.raises(ValidationError, match="medium_priority_confidence"):
            RecommendationConfig(high_priority_confidence=60.0, medium_priority_confidence=70.0)

    def test_overweight_range(self):
        with pytest.raises(ValidationError, match="overweight_pct"):
            RecommendationConfig(overweight_pct=0.0)

    def test_jitter_magnitude_capped(self):
        with pytest.raises(ValidationError, match="jitter_magnitude"):
            SentimentConfig(jitter_magnitude=0.05)

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            SentimentConfig(window_size=0)

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="Log level"):
            LoggingConfig(level="LOUD")

    def test_frozen(self):
        cfg = AppConfig()
        with pytest.raises(ValidationError):
            cfg.debug = True  # type: ignore[misc]
