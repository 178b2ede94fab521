"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from callavailability.config import AppConfig, LimitationsConfig


def _write_config(tmp_path, text: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_load_from_yaml(self, tmp_path):
        config_path = _write_config(tmp_path, (
            "timezone: America/New_York\n"
            "data_file: data/calls.json\n"
            "limitations:\n"
            "  minimum_notice_in_minutes: 90\n"
            "  maximum_calls_per_day: 4\n"
        ))

        config = AppConfig.load_from_yaml(config_path)

        assert config.timezone == "America/New_York"
        assert config.limitations.minimum_notice_in_minutes == 90
        assert config.limitations.maximum_calls_per_day == 4
        assert config.resolve_data_file(config_path) == tmp_path / "data" / "calls.json"

    def test_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(_write_config(tmp_path, ""))

        assert config.timezone == "Europe/Berlin"
        assert config.limitations.minimum_notice_in_minutes is None
        assert config.limitations.maximum_calls_per_day is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write_config(tmp_path, "limitations: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write_config(tmp_path, "- a\n- b\n"))

    def test_unknown_timezone(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown timezone"):
            AppConfig.load_from_yaml(_write_config(tmp_path, "timezone: Mars/Olympus_Mons\n"))

    def test_absolute_data_file_is_kept(self, tmp_path):
        data_file = tmp_path / "elsewhere" / "calls.json"
        config = AppConfig(data_file=data_file)

        assert config.resolve_data_file(tmp_path / "config.yaml") == data_file


class TestLimitationsConfig:
    """Tests for LimitationsConfig."""

    def test_negative_values_rejected(self):
        with pytest.raises(ValueError, match="must not be negative"):
            LimitationsConfig(minimum_notice_in_minutes=-1)

        with pytest.raises(ValueError, match="must not be negative"):
            LimitationsConfig(maximum_calls_per_day=-3)

    def test_to_limitations(self):
        limitations = LimitationsConfig(
            minimum_notice_in_minutes=30,
            maximum_calls_per_day=2,
        ).to_limitations()

        assert limitations.minimum_notice.in_minutes() == 30
        assert limitations.maximum_calls_per_day == 2
