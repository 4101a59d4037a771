"""Value types shared across climaseries."""

from climaseries.core.models.irrigation import IRRIGATION_TYPES, IrrigationType, get_irrigation_type
from climaseries.core.models.location import Location
from climaseries.core.models.timestep import TimeStep, adjust_time_step, days_in_month

__all__ = [
    "IRRIGATION_TYPES",
    "IrrigationType",
    "Location",
    "TimeStep",
    "adjust_time_step",
    "days_in_month",
    "get_irrigation_type",
]
