"""Record types populated by the binder."""

from climaseries.core.records.base import BoundRecord
from climaseries.core.records.climate_values import ACCUMULATED_FIELDS, ClimateValues
from climaseries.core.records.crop_sequence import CropSequenceValues, LocationValues

__all__ = [
    "ACCUMULATED_FIELDS",
    "BoundRecord",
    "ClimateValues",
    "CropSequenceValues",
    "LocationValues",
]
