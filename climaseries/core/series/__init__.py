"""Climate time series store."""

from climaseries.core.series.climate import (
    ID_COLUMN,
    ITERATOR_COLUMN,
    NAME_COLUMN,
    UNINITIALIZED_NAME,
    Climate,
    CorrectionHook,
    convert_time_step,
)

__all__ = [
    "ID_COLUMN",
    "ITERATOR_COLUMN",
    "NAME_COLUMN",
    "UNINITIALIZED_NAME",
    "Climate",
    "CorrectionHook",
    "convert_time_step",
]
