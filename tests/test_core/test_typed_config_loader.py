"""Tests for typed config loader — parses YAML and env into MetricsConfig."""

import textwrap
from pathlib import Path


class TestLoadMetricsConfig:
    def test_load_from_real_defaults_yaml(self):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        project_root = Path(__file__).resolve().parent.parent.parent
        config = load_metrics_config(project_root / "config" / "defaults.yaml")

        assert config.week_starts_on == 1
        assert config.score.penalty_factor == 1.0
        assert config.score.allow_negative_bad is False
        assert config.streak_lookback_days == 3650
        assert config.summary_cache_size == 366

    def test_load_from_minimal_yaml(self, tmp_path):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            metrics:
              week_starts_on: 0
              score:
                penalty_factor: 0.5
            """))

        config = load_metrics_config(yaml_file)
        assert config.week_starts_on == 0
        assert config.score.penalty_factor == 0.5
        assert config.score.allow_negative_bad is False
        assert config.streak_lookback_days == 3650

    def test_missing_file_returns_defaults(self, tmp_path):
        from habit_metrics.core.typed_config import MetricsConfig
        from habit_metrics.core.typed_config_loader import load_metrics_config

        assert load_metrics_config(tmp_path / "nonexistent.yaml") == MetricsConfig()

    def test_broken_yaml_returns_defaults(self, tmp_path):
        from habit_metrics.core.typed_config import MetricsConfig
        from habit_metrics.core.typed_config_loader import load_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text("metrics: [unclosed\n")
        assert load_metrics_config(yaml_file) == MetricsConfig()

    def test_invalid_values_fall_back(self, tmp_path):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            metrics:
              week_starts_on: 4
              score:
                penalty_factor: -1
            """))

        config = load_metrics_config(yaml_file)
        assert config.week_starts_on == 1
        assert config.score.penalty_factor == 1.0

    def test_invalid_field_keeps_valid_siblings(self, tmp_path):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            metrics:
              week_starts_on: 3
              streak_lookback_days: 30
              summary_cache_size: 0
              score:
                penalty_factor: -1
                allow_negative_bad: true
            """))

        config = load_metrics_config(yaml_file)
        assert config.week_starts_on == 1
        assert config.streak_lookback_days == 30
        assert config.summary_cache_size == 366
        assert config.score.penalty_factor == 1.0
        assert config.score.allow_negative_bad is True

    def test_non_mapping_score_section_ignored(self, tmp_path):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text(textwrap.dedent("""\
            metrics:
              week_starts_on: 0
              score: strict
            """))

        config = load_metrics_config(yaml_file)
        assert config.week_starts_on == 0
        assert config.score.penalty_factor == 1.0


class TestEnvOverrides:
    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text("metrics:\n  week_starts_on: 1\n")
        monkeypatch.setenv("HABIT_METRICS_WEEK_STARTS_ON", "0")
        monkeypatch.setenv("HABIT_METRICS_PENALTY_FACTOR", "2")
        monkeypatch.setenv("HABIT_METRICS_ALLOW_NEGATIVE_BAD", "true")
        monkeypatch.setenv("HABIT_METRICS_STREAK_LOOKBACK_DAYS", "30")

        config = load_metrics_config(yaml_file)
        assert config.week_starts_on == 0
        assert config.score.penalty_factor == 2.0
        assert config.score.allow_negative_bad is True
        assert config.streak_lookback_days == 30

    def test_invalid_env_week_start_uses_default(self, tmp_path, monkeypatch):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        monkeypatch.setenv("HABIT_METRICS_WEEK_STARTS_ON", "sunday")
        assert load_metrics_config(tmp_path / "none.yaml").week_starts_on == 1

    def test_invalid_env_lookback_uses_default(self, tmp_path, monkeypatch):
        from habit_metrics.core.typed_config_loader import load_metrics_config

        monkeypatch.setenv("HABIT_METRICS_STREAK_LOOKBACK_DAYS", "forever")
        assert load_metrics_config(tmp_path / "none.yaml").streak_lookback_days == 3650


class TestCachedAccessor:
    def test_cached_until_cleared(self, tmp_path, monkeypatch):
        from habit_metrics.core.config import get_settings
        from habit_metrics.core.typed_config_loader import _clear_caches, get_metrics_config

        yaml_file = tmp_path / "defaults.yaml"
        yaml_file.write_text("metrics:\n  week_starts_on: 0\n")
        monkeypatch.setenv("METRICS_CONFIG_PATH", str(yaml_file))
        get_settings.cache_clear()

        first = get_metrics_config()
        assert first.week_starts_on == 0
        assert get_metrics_config() is first

        yaml_file.write_text("metrics:\n  week_starts_on: 1\n")
        assert get_metrics_config().week_starts_on == 0

        _clear_caches()
        assert get_metrics_config().week_starts_on == 1
