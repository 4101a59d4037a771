"""Configuration management for climaseries."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from climaseries.core.exceptions import ConfigurationError
from climaseries.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TransportConfig:
    """Remote climate web service settings."""

    base_url: str = "https://climate.example.org/api/v1"
    timeout: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 1.0
    max_backoff: float = 30.0
    user_agent: str = "climaseries/0.1.0"


@dataclass
class ParsingConfig:
    """Defaults for parsing record sources."""

    culture: str = "invariant"
    delimiter: str = ","
    time_step: str = "day"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: str | None = None


@dataclass
class ClimaSeriesConfig:
    """Top level configuration."""

    transport: TransportConfig = field(default_factory=TransportConfig)
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ClimaSeriesConfig":
        """Build a configuration from a nested dictionary."""
        try:
            return cls(
                transport=TransportConfig(**config_dict.get("transport", {})),
                parsing=ParsingConfig(**config_dict.get("parsing", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as exc:
            raise ConfigurationError(f"invalid configuration: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Convert to a nested dictionary."""
        return {
            "transport": asdict(self.transport),
            "parsing": asdict(self.parsing),
            "logging": asdict(self.logging),
        }


class ConfigManager:
    """Loads and updates the climaseries configuration."""

    def __init__(self, config_path: Path | None = None):
        """Initialise the manager.

        Args:
            config_path: TOML file to read, defaults to ``~/.climaseries/config.toml``
        """
        self.config_path = config_path or Path.home() / ".climaseries" / "config.toml"
        self.config = self._load_config()

    def _load_config(self) -> ClimaSeriesConfig:
        if not self.config_path.exists():
            return ClimaSeriesConfig()

        try:
            with open(self.config_path, "rb") as f:
                config_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            # broken file falls back to defaults
            logger.warning("failed to load config", path=str(self.config_path), error=str(e))
            return ClimaSeriesConfig()
        return ClimaSeriesConfig.from_dict(config_dict)

    def get_config(self) -> ClimaSeriesConfig:
        """Return the current configuration."""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Deep-merge ``updates`` into the current configuration."""
        config_dict = self.config.to_dict()

        def deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
            for k, v in u.items():
                if isinstance(v, dict):
                    d[k] = deep_update(d.get(k, {}), v)
                else:
                    d[k] = v
            return d

        deep_update(config_dict, updates)
        self.config = ClimaSeriesConfig.from_dict(config_dict)


def load_config_from_env() -> dict[str, Any]:
    """Collect overrides from ``CLIMASERIES_*`` environment variables."""
    config: dict[str, Any] = {}

    transport_config: dict[str, Any] = {}
    base_url = os.getenv("CLIMASERIES_TRANSPORT_BASE_URL")
    if base_url:
        transport_config["base_url"] = base_url
    timeout = os.getenv("CLIMASERIES_TRANSPORT_TIMEOUT")
    if timeout is not None:
        transport_config["timeout"] = float(timeout)
    max_retries = os.getenv("CLIMASERIES_TRANSPORT_MAX_RETRIES")
    if max_retries is not None:
        transport_config["max_retries"] = int(max_retries)
    if transport_config:
        config["transport"] = transport_config

    parsing_config: dict[str, Any] = {}
    culture = os.getenv("CLIMASERIES_PARSING_CULTURE")
    if culture is not None:
        parsing_config["culture"] = culture
    delimiter = os.getenv("CLIMASERIES_PARSING_DELIMITER")
    if delimiter:
        parsing_config["delimiter"] = delimiter
    if parsing_config:
        config["parsing"] = parsing_config

    logging_config: dict[str, Any] = {}
    level = os.getenv("CLIMASERIES_LOGGING_LEVEL")
    if level is not None:
        logging_config["level"] = level
    log_file = os.getenv("CLIMASERIES_LOGGING_FILE")
    if log_file is not None:
        logging_config["file"] = log_file
    if logging_config:
        config["logging"] = logging_config

    return config
