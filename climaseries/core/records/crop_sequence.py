"""Crop sequence rows referencing plants, soils and climates by name."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from climaseries.core.binding import FieldKind, FieldSpec, RecordSchema
from climaseries.core.models import IrrigationType, Location, TimeStep
from climaseries.core.records.base import BoundRecord


class LocationValues(BoundRecord):
    """Position columns, bound from ``location.lon`` style keys."""

    lon: float | None = None
    lat: float | None = None
    alt: float | None = None

    FIELDS: ClassVar[RecordSchema] = RecordSchema.of(
        FieldSpec("lon", FieldKind.FLOAT),
        FieldSpec("lat", FieldKind.FLOAT),
        FieldSpec("alt", FieldKind.FLOAT),
    )

    def to_location(self) -> Location:
        return Location(lon=self.lon, lat=self.lat, alt=self.alt)


class CropSequenceValues(BoundRecord):
    """One crop grown on a field between seed and harvest.

    ``plant``, ``soil`` and ``climate`` hold whatever the resolvers passed to
    the binder return for the referenced names.
    """

    field: str | None = None
    position: str | None = None
    plant: Any = None
    soil: Any = None
    climate: Any = None
    climate_step: TimeStep | None = None
    irrigation_type: IrrigationType | None = None
    seed_date: datetime | None = None
    harvest_date: datetime | None = None
    area: float | None = None
    max_irrigation: float | None = None
    location: LocationValues | None = None

    FIELDS: ClassVar[RecordSchema] = RecordSchema.of(
        FieldSpec("field", FieldKind.STRING),
        FieldSpec("position", FieldKind.STRING),
        FieldSpec("plant", FieldKind.PLANT),
        FieldSpec("soil", FieldKind.SOIL),
        FieldSpec("climate", FieldKind.CLIMATE),
        FieldSpec("climate_step", FieldKind.ENUM, TimeStep),
        FieldSpec("irrigation_type", FieldKind.IRRIGATION_TYPE, external_name="irrigationType"),
        FieldSpec("seed_date", FieldKind.VALUE, datetime, external_name="seedDate"),
        FieldSpec("harvest_date", FieldKind.VALUE, datetime, external_name="harvestDate"),
        FieldSpec("area", FieldKind.FLOAT),
        FieldSpec("max_irrigation", FieldKind.FLOAT, external_name="maxIrrigation"),
        FieldSpec("location", FieldKind.NESTED, LocationValues),
    )
