"""Exception handling module."""

from climaseries.core.exceptions.base import (
    ClimaSeriesError,
    ConfigurationError,
    MalformedValueError,
    NetworkError,
    TransportError,
    UnknownClimateError,
    UnsupportedConversionError,
)

__all__ = [
    "ClimaSeriesError",
    "ConfigurationError",
    "MalformedValueError",
    "NetworkError",
    "TransportError",
    "UnknownClimateError",
    "UnsupportedConversionError",
]
