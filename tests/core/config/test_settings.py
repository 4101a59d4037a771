"""Tests for configuration management."""

from pathlib import Path

import pytest

from climaseries.core.config import (
    ClimaSeriesConfig,
    ConfigManager,
    ParsingConfig,
    TransportConfig,
    load_config_from_env,
)
from climaseries.core.exceptions import ConfigurationError


class TestClimaSeriesConfig:
    def test_defaults(self):
        config = ClimaSeriesConfig()

        assert config.transport.timeout == 30.0
        assert config.transport.max_retries == 3
        assert config.parsing.culture == "invariant"
        assert config.parsing.time_step == "day"
        assert config.logging.level == "INFO"
        assert config.logging.file is None

    def test_round_trip_through_dict(self):
        config = ClimaSeriesConfig(
            transport=TransportConfig(base_url="https://example.test", timeout=5.0),
            parsing=ParsingConfig(culture="de-DE", delimiter=";"),
        )

        restored = ClimaSeriesConfig.from_dict(config.to_dict())

        assert restored == config

    def test_unknown_key_raises(self):
        with pytest.raises(ConfigurationError):
            ClimaSeriesConfig.from_dict({"transport": {"retries": 4}})


class TestConfigManager:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        manager = ConfigManager(tmp_path / "absent.toml")

        assert manager.get_config() == ClimaSeriesConfig()

    def test_loads_toml(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[transport]\nbase_url = "https://climate.test"\nmax_retries = 5\n\n[parsing]\nculture = "de-DE"\n',
            encoding="utf-8",
        )

        config = ConfigManager(path).get_config()

        assert config.transport.base_url == "https://climate.test"
        assert config.transport.max_retries == 5
        assert config.transport.timeout == 30.0
        assert config.parsing.culture == "de-DE"

    def test_broken_toml_falls_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text("[transport\nbase_url = ", encoding="utf-8")

        assert ConfigManager(path).get_config() == ClimaSeriesConfig()

    def test_update_config_merges(self, tmp_path: Path):
        manager = ConfigManager(tmp_path / "absent.toml")

        manager.update_config(transport={"timeout": 2.5}, logging={"level": "DEBUG"})

        config = manager.get_config()
        assert config.transport.timeout == 2.5
        assert config.transport.max_retries == 3
        assert config.logging.level == "DEBUG"


class TestEnvironment:
    def test_no_variables(self, monkeypatch):
        for name in (
            "CLIMASERIES_TRANSPORT_BASE_URL",
            "CLIMASERIES_TRANSPORT_TIMEOUT",
            "CLIMASERIES_TRANSPORT_MAX_RETRIES",
            "CLIMASERIES_PARSING_CULTURE",
            "CLIMASERIES_PARSING_DELIMITER",
            "CLIMASERIES_LOGGING_LEVEL",
            "CLIMASERIES_LOGGING_FILE",
        ):
            monkeypatch.delenv(name, raising=False)

        assert load_config_from_env() == {}

    def test_overrides(self, monkeypatch):
        monkeypatch.delenv("CLIMASERIES_PARSING_DELIMITER", raising=False)
        monkeypatch.delenv("CLIMASERIES_LOGGING_FILE", raising=False)
        monkeypatch.setenv("CLIMASERIES_TRANSPORT_BASE_URL", "https://env.test")
        monkeypatch.setenv("CLIMASERIES_TRANSPORT_TIMEOUT", "12.5")
        monkeypatch.setenv("CLIMASERIES_TRANSPORT_MAX_RETRIES", "0")
        monkeypatch.setenv("CLIMASERIES_PARSING_CULTURE", "fr-FR")
        monkeypatch.setenv("CLIMASERIES_LOGGING_LEVEL", "WARNING")

        overrides = load_config_from_env()

        assert overrides["transport"] == {"base_url": "https://env.test", "timeout": 12.5, "max_retries": 0}
        assert overrides["parsing"] == {"culture": "fr-FR"}
        assert overrides["logging"] == {"level": "WARNING"}
