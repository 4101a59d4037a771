"""Pytest configuration for the climaseries test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

import pytest

from climaseries.core.data.transport import ClimateTransport
from climaseries.core.exceptions import TransportError
from climaseries.core.models import Location, TimeStep


def make_climate_row(name: str, moment: str, data_obj_id: str = "", **values: str) -> dict[str, str]:
    """Row in the layout of CSV exports and service responses."""

    return {"dataObjName": name, "dataObjId": data_obj_id, "_iterator.date": moment, **values}


def _in_window(row: Mapping[str, str], start: datetime, end: datetime) -> bool:
    return start <= datetime.fromisoformat(row["_iterator.date"]) <= end


class FakeClimateTransport(ClimateTransport):
    """In-memory climate service recording every call."""

    name = "fake-climate-service"

    def __init__(
        self,
        climates: Mapping[str, str] | None = None,
        rows: Mapping[str, list[dict[str, str]]] | None = None,
        base_data: Mapping[str, Mapping[str, Any]] | None = None,
        altitude: float = 100.0,
    ) -> None:
        self.climates = dict(climates or {})
        self.rows = dict(rows or {})
        self.base_data = dict(base_data or {})
        self.altitude = altitude
        self.calls: list[tuple[Any, ...]] = []
        self.fail_with: TransportError | None = None
        self.delay = 0.0
        self.closed = False

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    async def list_climates(self, tag: str | None = None) -> Iterable[Mapping[str, str]]:
        self.calls.append(("list_climates", tag))
        self._check()
        return [{"name": name, "_id": data_obj_id} for name, data_obj_id in self.climates.items()]

    async def fetch_climate_by_id(
        self,
        data_obj_id: str,
        start: datetime,
        end: datetime,
        step: TimeStep,
    ) -> Iterable[Mapping[str, str]]:
        self.calls.append(("fetch_climate_by_id", data_obj_id, start, end, step))
        if self.delay:
            await asyncio.sleep(self.delay)
        self._check()
        return [row for row in self.rows.get(data_obj_id, []) if _in_window(row, start, end)]

    async def fetch_climate_by_location_tag(
        self,
        location: Location,
        tag: str | None,
        start: datetime,
        end: datetime,
        step: TimeStep,
    ) -> Iterable[Mapping[str, str]]:
        self.calls.append(("fetch_climate_by_location_tag", location, tag, start, end, step))
        self._check()
        return list(self.rows.get(tag or "", []))

    async def fetch_base_data(self, data_obj_id: str) -> Mapping[str, Any]:
        self.calls.append(("fetch_base_data", data_obj_id))
        self._check()
        return self.base_data.get(data_obj_id, {})

    async def fetch_altitude(self, location: Location) -> float:
        self.calls.append(("fetch_altitude", location))
        self._check()
        return self.altitude

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeClimateTransport:
    return FakeClimateTransport()


@pytest.fixture
def climate_row():
    return make_climate_row
