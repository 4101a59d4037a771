"""Configuration management module."""

from climaseries.core.config.settings import (
    ClimaSeriesConfig,
    ConfigManager,
    LoggingConfig,
    ParsingConfig,
    TransportConfig,
    load_config_from_env,
)

__all__ = [
    "ClimaSeriesConfig",
    "ConfigManager",
    "LoggingConfig",
    "ParsingConfig",
    "TransportConfig",
    "load_config_from_env",
]
