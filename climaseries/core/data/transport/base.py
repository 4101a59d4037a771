"""Contract of the remote climate service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from climaseries.core.models import Location, TimeStep


class ClimateTransport(ABC):
    """Async access to a remote climate web service.

    Implementations raise :class:`~climaseries.core.exceptions.TransportError`
    on failure. Record streams are rows in the same layout as CSV exports
    (``dataObjName``, ``dataObjId``, ``_iterator.date`` plus value columns).
    """

    name: str = "climate-service"

    @abstractmethod
    async def list_climates(self, tag: str | None = None) -> Iterable[Mapping[str, str]]:
        """Rows with ``name`` and ``_id`` of every climate available for ``tag``."""

    @abstractmethod
    async def fetch_climate_by_id(
        self,
        data_obj_id: str,
        start: datetime,
        end: datetime,
        step: TimeStep,
    ) -> Iterable[Mapping[str, str]]:
        """Rows of one climate between ``start`` and ``end``."""

    @abstractmethod
    async def fetch_climate_by_location_tag(
        self,
        location: Location,
        tag: str | None,
        start: datetime,
        end: datetime,
        step: TimeStep,
    ) -> Iterable[Mapping[str, str]]:
        """Rows of the climate station nearest to ``location``."""

    @abstractmethod
    async def fetch_base_data(self, data_obj_id: str) -> Mapping[str, Any]:
        """Station metadata: ``location`` as ``[lon, lat]`` and ``altitude``."""

    @abstractmethod
    async def fetch_altitude(self, location: Location) -> float:
        """Terrain altitude at ``location`` in metres."""

    async def aclose(self) -> None:
        """Release network resources."""
        return None
