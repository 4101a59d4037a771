"""Climate observation record."""

from __future__ import annotations

from typing import ClassVar

from climaseries.core.binding import RecordSchema, float_fields
from climaseries.core.records.base import BoundRecord

# Quantities accumulated over the time step, split evenly when a month is
# distributed onto days.
ACCUMULATED_FIELDS = ("precipitation", "sunshine_duration", "Rs", "et0")


class ClimateValues(BoundRecord):
    """Climate values of one time step.

    Units: temperatures in °C, ``humidity`` in %, ``windspeed`` at 2 m in m/s,
    ``sunshine_duration`` in h, ``Rs`` (global radiation) in MJ/(m²·d),
    ``precipitation``/``et0``/``rp_precipitation`` in mm, ``cloudiness`` in
    eighths, pressures in hPa.

    ``rp_precipitation`` is the rain-pattern corrected precipitation; it is
    derived when values are read from a :class:`~climaseries.core.series.Climate`.
    """

    max_temp: float | None = None
    min_temp: float | None = None
    mean_temp: float | None = None
    humidity: float | None = None
    windspeed: float | None = None
    sunshine_duration: float | None = None
    Rs: float | None = None
    precipitation: float | None = None
    et0: float | None = None
    cloudiness: float | None = None
    air_pressure: float | None = None
    vapour_pressure: float | None = None
    rp_precipitation: float | None = None

    FIELDS: ClassVar[RecordSchema] = RecordSchema.of(
        *float_fields(
            "max_temp",
            "min_temp",
            "mean_temp",
            "humidity",
            "windspeed",
            "sunshine_duration",
            "Rs",
            "precipitation",
            "et0",
            "cloudiness",
            "air_pressure",
            "vapour_pressure",
            "rp_precipitation",
        )
    )

    @property
    def effective_mean_temp(self) -> float | None:
        """``mean_temp``, or the midpoint of max and min when it is missing."""
        if self.mean_temp is not None:
            return self.mean_temp
        if self.max_temp is None or self.min_temp is None:
            return None
        return (self.max_temp + self.min_temp) / 2
