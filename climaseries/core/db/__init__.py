"""Collections of climates."""

from climaseries.core.db.climate_db import ClimateDb
from climaseries.core.db.service_cache import ClimateServiceCache

__all__ = ["ClimateDb", "ClimateServiceCache"]
