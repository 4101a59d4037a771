"""climaseries core: binding, records, time series store and caches."""

from climaseries.core.binding import Culture, Resolvers, bind_record
from climaseries.core.config import ClimaSeriesConfig, ConfigManager
from climaseries.core.db import ClimateDb, ClimateServiceCache
from climaseries.core.models import Location, TimeStep
from climaseries.core.records import ClimateValues, CropSequenceValues
from climaseries.core.series import Climate

__all__ = [
    "ClimaSeriesConfig",
    "Climate",
    "ClimateDb",
    "ClimateServiceCache",
    "ClimateValues",
    "ConfigManager",
    "CropSequenceValues",
    "Culture",
    "Location",
    "Resolvers",
    "TimeStep",
    "bind_record",
]
