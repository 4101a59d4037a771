"""Lazily filled cache of climates served by the remote climate service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime

from climaseries.core.binding import Culture
from climaseries.core.data.transport import ClimateTransport
from climaseries.core.exceptions import UnknownClimateError
from climaseries.core.logging import get_logger, log_context
from climaseries.core.models import TimeStep
from climaseries.core.series import Climate

logger = get_logger(__name__)


@dataclass(slots=True)
class _Flight:
    """A fetch in progress for one climate name."""

    task: asyncio.Future[Climate]
    start: datetime
    end: datetime

    def covers(self, start: datetime, end: datetime) -> bool:
        return self.start <= start and end <= self.end


class ClimateServiceCache:
    """Climates of the remote service, fetched on demand and kept per name.

    The name to id table is loaded wholesale on first use (or on ``reinit``).
    A climate is fetched again only when a request reaches outside the range
    it already covers; the new window is added to the existing store.

    At most one fetch per name is in flight. Callers asking for a window the
    running fetch covers wait for it and share its result; callers asking for
    more wait and then decide again.
    """

    def __init__(
        self,
        transport: ClimateTransport,
        *,
        culture: Culture | None = None,
    ) -> None:
        self._transport = transport
        self._culture = culture
        self._ids: dict[str, str] = {}
        self._ids_loaded = False
        self._instances: dict[str, Climate] = {}
        self._flights: dict[str, _Flight] = {}
        self._ids_lock = asyncio.Lock()

    async def __aenter__(self) -> ClimateServiceCache:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    @property
    def climate_ids(self) -> dict[str, str]:
        return dict(self._ids)

    def cached(self, name: str) -> Climate | None:
        """Memoized climate without touching the service."""
        return self._instances.get(name)

    async def _initialize(self, tag: str | None) -> int:
        rows = await self._transport.list_climates(tag)
        ids: dict[str, str] = {}
        for row in rows:
            name = row.get("name")
            data_obj_id = row.get("_id")
            if not name or not data_obj_id:
                continue
            ids[name] = data_obj_id
        self._ids = ids
        self._ids_loaded = True
        self._instances.clear()
        logger.info("climate ids loaded", tag=tag, count=len(ids))
        return len(ids)

    async def get_climate_names(self, reinit: bool = False, tag: str | None = None) -> list[str]:
        """Names of all climates offered by the service.

        The table is requested on first use or when ``reinit`` is set; a reload
        also drops every memoized climate.

        Raises:
            TransportError: the name table could not be loaded
        """
        async with self._ids_lock:
            if not self._ids_loaded or reinit:
                await self._initialize(tag)
        return list(self._ids)

    async def _resolve_id(self, name: str) -> str:
        if not self._ids_loaded:
            await self.get_climate_names()
        data_obj_id = self._ids.get(name)
        if data_obj_id is None:
            raise UnknownClimateError(name)
        return data_obj_id

    async def get_climate(
        self,
        name: str,
        start: datetime,
        end: datetime,
        step: TimeStep = TimeStep.DAY,
    ) -> Climate:
        """Climate ``name`` holding at least ``[start, end]`` if the service has it.

        Transport failures while fetching values do not raise; they are kept
        in the returned climate's ``last_error``.

        Raises:
            UnknownClimateError: the service does not list ``name``
            TransportError: the name table could not be loaded
        """
        data_obj_id = await self._resolve_id(name)

        while True:
            climate = self._instances.get(name)
            if climate is not None and climate.covers(start, end):
                return climate
            flight = self._flights.get(name)
            if flight is None or flight.task.done():
                break
            result = await asyncio.shield(flight.task)
            if flight.covers(start, end):
                return result

        if climate is None:
            climate = Climate(name, step, data_obj_id=data_obj_id, culture=self._culture)
            self._instances[name] = climate

        flight = _Flight(
            task=asyncio.ensure_future(self._fetch(climate, start, end)),
            start=start,
            end=end,
        )
        self._flights[name] = flight
        flight.task.add_done_callback(lambda _: self._land(name, flight))
        # shielded so a cancelled caller does not cancel the shared fetch
        return await asyncio.shield(flight.task)

    def _land(self, name: str, flight: _Flight) -> None:
        if self._flights.get(name) is flight:
            del self._flights[name]

    async def _fetch(self, climate: Climate, start: datetime, end: datetime) -> Climate:
        with log_context(climate=climate.name):
            count = await climate.load_by_id(self._transport, start, end)
            if climate.last_error is None:
                logger.debug("climate fetched", count=count, start=start, end=end)
        return climate


__all__ = ["ClimateServiceCache"]
