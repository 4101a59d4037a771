"""Record sources and remote transports."""

from climaseries.core.data.sources import read_csv_records
from climaseries.core.data.transport import ClimateTransport, HttpClimateTransport

__all__ = ["ClimateTransport", "HttpClimateTransport", "read_csv_records"]
