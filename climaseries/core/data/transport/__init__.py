"""Remote climate service transports."""

from climaseries.core.data.transport.base import ClimateTransport
from climaseries.core.data.transport.http import HttpClimateTransport

__all__ = ["ClimateTransport", "HttpClimateTransport"]
