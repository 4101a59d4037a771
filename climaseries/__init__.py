"""climaseries - climate time series binding and caching.

Binds flat climate records (CSV rows or web service responses) onto typed
records, keeps them on a uniform daily time axis and serves point and range
queries. Remote climates are fetched lazily and cached per name.
"""

from __future__ import annotations

from pathlib import Path

from climaseries.core.binding import INVARIANT, Culture, Resolvers, bind_record
from climaseries.core.config import ClimaSeriesConfig, ConfigManager, LoggingConfig, load_config_from_env
from climaseries.core.data import HttpClimateTransport, read_csv_records
from climaseries.core.db import ClimateDb, ClimateServiceCache
from climaseries.core.exceptions import (
    ClimaSeriesError,
    MalformedValueError,
    TransportError,
    UnknownClimateError,
    UnsupportedConversionError,
)
from climaseries.core.logging import configure_logging
from climaseries.core.models import Location, TimeStep
from climaseries.core.records import ClimateValues, CropSequenceValues, LocationValues
from climaseries.core.series import Climate

__version__ = "0.1.0"


def load_config(config_path: Path | None = None) -> ClimaSeriesConfig:
    """Configuration from the TOML file with ``CLIMASERIES_*`` overrides applied."""
    manager = ConfigManager(config_path)
    overrides = load_config_from_env()
    if overrides:
        manager.update_config(**overrides)
    return manager.get_config()


def setup_logging(config: LoggingConfig) -> None:
    """Apply the logging section of a configuration."""
    configure_logging(
        level=config.level,
        file_output=config.file is not None,
        file_path=config.file,
    )


def create_service_cache(config: ClimaSeriesConfig | None = None) -> ClimateServiceCache:
    """Remote climate cache talking HTTP, set up from ``config``.

    Examples:
        >>> import climaseries
        >>> async with climaseries.create_service_cache() as cache:
        ...     climate = await cache.get_climate("Berlin", start, end)
    """
    config = config or load_config()
    return ClimateServiceCache(
        HttpClimateTransport(config.transport),
        culture=Culture.from_name(config.parsing.culture),
    )


def open_climate(
    path: str | Path,
    step: TimeStep | str | None = None,
    config: ClimaSeriesConfig | None = None,
) -> Climate:
    """Load a climate from a CSV file, gzip compressed or not.

    Culture, delimiter and (unless given) the time step come from the
    parsing section of ``config``. Check ``last_error`` of the result for
    partially loaded files.
    """
    config = config or load_config()
    time_step = TimeStep(step or config.parsing.time_step)
    with open(path, "rb") as stream:
        return Climate.from_stream(
            stream,
            time_step,
            culture=Culture.from_name(config.parsing.culture),
            delimiter=config.parsing.delimiter,
        )


__all__ = [
    "INVARIANT",
    "ClimaSeriesConfig",
    "ClimaSeriesError",
    "Climate",
    "ClimateDb",
    "ClimateServiceCache",
    "ClimateValues",
    "CropSequenceValues",
    "Culture",
    "HttpClimateTransport",
    "Location",
    "LocationValues",
    "MalformedValueError",
    "Resolvers",
    "TimeStep",
    "TransportError",
    "UnknownClimateError",
    "UnsupportedConversionError",
    "bind_record",
    "create_service_cache",
    "load_config",
    "open_climate",
    "read_csv_records",
    "setup_logging",
]
