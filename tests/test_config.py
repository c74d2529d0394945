"""Tests for WaitConfig and YAML configuration loading."""

from datetime import timedelta
from pathlib import Path

import pytest
import yaml

from logwait.config import ConfigurationError, WaitConfig, load_wait_config


class TestWaitConfig:
    """Tests for WaitConfig validation."""

    def test_defaults(self) -> None:
        config = WaitConfig().validate()

        assert config.timeout_seconds == 900
        assert config.scan_interval_ms == 500
        assert config.scan_interval_seconds == 0.5
        assert config.encoding == "utf-8"

    def test_timedelta_timeout_converted(self) -> None:
        config = WaitConfig(timeout_seconds=timedelta(minutes=2)).validate()
        assert config.timeout_seconds == 120

    @pytest.mark.parametrize("timeout", [0, -1, None, "10", True])
    def test_invalid_timeout(self, timeout) -> None:
        with pytest.raises(ConfigurationError, match="timeout"):
            WaitConfig(timeout_seconds=timeout).validate()

    @pytest.mark.parametrize("interval", [0, -500, None])
    def test_invalid_interval(self, interval) -> None:
        with pytest.raises(ConfigurationError, match="scan interval"):
            WaitConfig(scan_interval_ms=interval).validate()

    def test_unknown_encoding(self) -> None:
        with pytest.raises(ConfigurationError, match="encoding"):
            WaitConfig(encoding="no-such-codec").validate()

    def test_configuration_error_is_value_error(self) -> None:
        assert issubclass(ConfigurationError, ValueError)


class TestLoadWaitConfig:
    """Tests for loading configuration from YAML."""

    def write_config(self, tmp_path: Path, data) -> Path:
        config_file = tmp_path / "wait.yaml"
        with open(config_file, "w") as f:
            yaml.dump(data, f, sort_keys=False)
        return config_file

    def test_load_settings_and_patterns(self, tmp_path: Path) -> None:
        config_file = self.write_config(
            tmp_path,
            {
                "timeout_seconds": 60,
                "scan_interval_ms": 250,
                "patterns": {"Completed": "done", "Failed": "error"},
            },
        )

        loaded = load_wait_config(config_file)

        assert loaded.wait.timeout_seconds == 60
        assert loaded.wait.scan_interval_ms == 250
        assert list(loaded.patterns.items()) == [("Completed", "done"), ("Failed", "error")]

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "wait.yaml"
        config_file.write_text("")

        loaded = load_wait_config(config_file)

        assert loaded.wait == WaitConfig()
        assert loaded.patterns == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_wait_config(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "wait.yaml"
        config_file.write_text("timeout_seconds: [unclosed\n")

        with pytest.raises(ConfigurationError, match="parse"):
            load_wait_config(config_file)

    def test_unknown_keys_rejected(self, tmp_path: Path) -> None:
        config_file = self.write_config(tmp_path, {"timeout": 5})

        with pytest.raises(ConfigurationError, match="Unknown configuration keys: timeout"):
            load_wait_config(config_file)

    def test_patterns_must_be_mapping(self, tmp_path: Path) -> None:
        config_file = self.write_config(tmp_path, {"patterns": ["Completed"]})

        with pytest.raises(ConfigurationError, match="patterns"):
            load_wait_config(config_file)

    def test_invalid_values_rejected(self, tmp_path: Path) -> None:
        config_file = self.write_config(tmp_path, {"scan_interval_ms": 0})

        with pytest.raises(ConfigurationError):
            load_wait_config(config_file)
