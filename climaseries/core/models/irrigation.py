"""Closed set of irrigation methods."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict


class IrrigationType(BaseModel):
    """An irrigation method.

    ``fw`` is the fraction of the soil surface wetted by the method
    (FAO-56, table 20, mid-range values).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    fw: float


_KNOWN_TYPES = (
    IrrigationType(name="precipitation", fw=1.0),
    IrrigationType(name="sprinkler", fw=1.0),
    IrrigationType(name="basin", fw=1.0),
    IrrigationType(name="border", fw=1.0),
    IrrigationType(name="furrow", fw=0.8),
    IrrigationType(name="furrow_alternated", fw=0.4),
    IrrigationType(name="drip", fw=0.35),
)

IRRIGATION_TYPES: Mapping[str, IrrigationType] = MappingProxyType({t.name: t for t in _KNOWN_TYPES})


def get_irrigation_type(name: str) -> IrrigationType | None:
    """Exact-name lookup, ``None`` for unknown methods."""
    return IRRIGATION_TYPES.get(name)


__all__ = ["IRRIGATION_TYPES", "IrrigationType", "get_irrigation_type"]
