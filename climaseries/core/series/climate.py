"""Time series of climate values keyed by time step buckets."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import IO, Any

from climaseries.core.binding import INVARIANT, Culture, bind_record
from climaseries.core.data.sources import read_csv_records
from climaseries.core.data.transport import ClimateTransport
from climaseries.core.exceptions import MalformedValueError, TransportError, UnsupportedConversionError
from climaseries.core.logging import get_logger
from climaseries.core.models import Location, TimeStep, adjust_time_step, days_in_month
from climaseries.core.records import ACCUMULATED_FIELDS, ClimateValues

logger = get_logger(__name__)

NAME_COLUMN = "dataObjName"
ID_COLUMN = "dataObjId"
ITERATOR_COLUMN = "_iterator.date"
UNINITIALIZED_NAME = "uninitialized_climate"

# (exact date, monthly precipitation) -> corrected precipitation or None
CorrectionHook = Callable[[datetime, float], float | None]


def convert_time_step(
    values: ClimateValues,
    bucket: datetime,
    native: TimeStep,
    requested: TimeStep,
) -> ClimateValues:
    """Convert a record from ``native`` to ``requested`` granularity.

    Only month to day is supported: accumulated quantities are spread evenly
    over the days of the bucket's month, everything else keeps its monthly
    value.

    Raises:
        UnsupportedConversionError: for any other pair of time steps
    """
    native = TimeStep(native)
    requested = TimeStep(requested)
    if not (native is TimeStep.MONTH and requested is TimeStep.DAY):
        raise UnsupportedConversionError(native.value, requested.value)

    days = days_in_month(bucket)
    update = {}
    for name in ACCUMULATED_FIELDS:
        value = getattr(values, name)
        if value is not None:
            update[name] = value / days
    return values.model_copy(update=update)


class Climate:
    """Climate values of one station, one record per time step bucket.

    Values are stored under the start of their bucket (hour, day or month).
    Monthly sources are distributed onto days while loading, so a monthly
    store holds daily-equivalent values under each month's first day.

    The covered range ``[start, end]`` only ever grows. Bulk loads never
    raise: the first failure stops the load and is kept in ``last_error``.
    """

    def __init__(
        self,
        name: str | None = None,
        step: TimeStep = TimeStep.DAY,
        *,
        data_obj_id: str | None = None,
        culture: Culture | None = None,
        location: Location | None = None,
        rain_pattern: CorrectionHook | None = None,
    ) -> None:
        self._name = name
        self._step = TimeStep(step)
        self._data_obj_id = data_obj_id
        self._culture = culture or INVARIANT
        self._location = location
        self._data: dict[datetime, ClimateValues] = {}
        self._start: datetime | None = None
        self._end: datetime | None = None
        self._last_error: Exception | None = None
        self.rain_pattern = rain_pattern

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, str]],
        step: TimeStep = TimeStep.DAY,
        *,
        culture: Culture | None = None,
    ) -> Climate:
        """Create a climate and load ``records`` into it right away."""
        climate = cls(step=step, culture=culture)
        climate.load_records(records)
        return climate

    @classmethod
    def from_stream(
        cls,
        stream: IO[bytes],
        step: TimeStep = TimeStep.DAY,
        *,
        culture: Culture | None = None,
        delimiter: str = ",",
    ) -> Climate:
        """Create a climate from a (possibly gzipped) CSV byte stream."""
        climate = cls(step=step, culture=culture)
        climate.load_stream(stream, delimiter=delimiter)
        return climate

    @property
    def name(self) -> str:
        return self._name or UNINITIALIZED_NAME

    @property
    def data_obj_id(self) -> str | None:
        return self._data_obj_id

    @property
    def step(self) -> TimeStep:
        return self._step

    @property
    def start(self) -> datetime | None:
        return self._start

    @property
    def end(self) -> datetime | None:
        return self._end

    @property
    def location(self) -> Location | None:
        return self._location

    @property
    def count(self) -> int:
        return len(self._data)

    @property
    def last_error(self) -> Exception | None:
        """Exception that stopped the last load, ``None`` if it succeeded."""
        return self._last_error

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, moment: object) -> bool:
        if not isinstance(moment, datetime):
            return False
        return adjust_time_step(moment, self._step) in self._data

    def __repr__(self) -> str:
        return f"Climate(name={self.name!r}, step={self._step.value}, count={len(self)}, start={self._start}, end={self._end})"

    def covers(self, start: datetime, end: datetime) -> bool:
        """Whether ``[start, end]`` lies inside the covered range."""
        if self._start is None or self._end is None:
            return False
        return self._start <= start and end <= self._end

    def add_values(self, moment: datetime, values: ClimateValues) -> int:
        """Store ``values`` in the bucket of ``moment``, replacing earlier values.

        Returns:
            number of stored buckets
        """
        self._data[adjust_time_step(moment, self._step)] = values
        self._start = moment if self._start is None else min(self._start, moment)
        self._end = moment if self._end is None else max(self._end, moment)
        return len(self._data)

    def get_values(self, moment: datetime) -> ClimateValues | None:
        """Values of the bucket containing ``moment``, ``None`` if there are none.

        The returned copy carries ``rp_precipitation``: for monthly series
        with a rain pattern it is the pattern's value for ``moment``, in every
        other case the plain precipitation.
        """
        stored = self._data.get(adjust_time_step(moment, self._step))
        if stored is None:
            return None

        corrected = stored.precipitation
        if self._step is TimeStep.MONTH and self.rain_pattern is not None and stored.precipitation is not None:
            pattern_value = self.rain_pattern(moment, stored.precipitation * days_in_month(moment))
            if pattern_value is not None:
                corrected = pattern_value
        return stored.model_copy(update={"rp_precipitation": corrected})

    def items(self) -> list[tuple[datetime, ClimateValues]]:
        """Stored buckets in time order."""
        return sorted(self._data.items(), key=lambda item: item[0])

    def values_between(self, start: datetime, end: datetime) -> list[tuple[datetime, ClimateValues]]:
        """Stored buckets from the bucket of ``start`` up to ``end``, in time order."""
        first = adjust_time_step(start, self._step)
        return [(bucket, values) for bucket, values in self.items() if first <= bucket <= end]

    def load_stream(self, stream: IO[bytes], *, delimiter: str = ",") -> int:
        """Load a (possibly gzipped) CSV byte stream, see :meth:`load_records`."""
        return self.load_records(read_csv_records(stream, delimiter=delimiter))

    def load_records(self, records: Iterable[Mapping[str, str]]) -> int:
        """Bind and insert rows in source order.

        Rows without a climate name or without a date are skipped. The first
        exception stops loading; it is kept in :attr:`last_error` and the rows
        inserted before it stay in place.

        Returns:
            number of stored buckets
        """
        self._last_error = None
        inserted = 0
        issue_counts: Counter[str] = Counter()
        try:
            for row in records:
                if not row:
                    continue
                name = row.get(NAME_COLUMN)
                if not name:
                    continue
                if not self._name:
                    self._name = name
                data_obj_id = row.get(ID_COLUMN)
                if data_obj_id and not self._data_obj_id:
                    self._data_obj_id = data_obj_id

                result = bind_record(ClimateValues, row, culture=self._culture)
                issue_counts.update(issue.code for issue in result.issues)

                raw_moment = row.get(ITERATOR_COLUMN)
                if not raw_moment:
                    continue
                moment = self._parse_moment(raw_moment)

                values = result.record
                if self._step.is_coarser_than(TimeStep.DAY):
                    values = convert_time_step(
                        values, adjust_time_step(moment, self._step), self._step, TimeStep.DAY
                    )
                self.add_values(moment, values)
                inserted += 1
        except Exception as exc:
            self._last_error = exc
            logger.warning(
                "climate load stopped",
                climate=self.name,
                inserted=inserted,
                error=str(exc),
                error_code=getattr(exc, "error_code", None),
            )
            return len(self._data)

        if issue_counts:
            logger.info("climate rows had unbound columns", climate=self.name, issues=dict(issue_counts))
        logger.debug("climate loaded", climate=self.name, inserted=inserted, count=len(self._data))
        return len(self._data)

    def _parse_moment(self, raw: str) -> datetime:
        try:
            return self._culture.parse_datetime(raw)
        except ValueError as exc:
            raise MalformedValueError(
                f"invalid date for '{ITERATOR_COLUMN}': {raw!r}", field=ITERATOR_COLUMN, value=raw
            ) from exc

    def _record_transport_error(self, exc: TransportError) -> None:
        self._last_error = exc
        logger.warning(
            "climate service request failed",
            climate=self.name,
            error=str(exc),
            error_code=exc.error_code,
        )

    def _apply_base_data(self, base_data: Mapping[str, Any]) -> None:
        position = base_data.get("location")
        if not position:
            return
        location = self._location or Location()
        location.lon = float(position[0])
        location.lat = float(position[1])
        altitude = base_data.get("altitude")
        if altitude is not None:
            location.alt = float(altitude)
        self._location = location

    async def load_by_id(self, transport: ClimateTransport, start: datetime, end: datetime) -> int:
        """Fetch this climate's values for ``[start, end]`` by its ``data_obj_id``.

        Station metadata is fetched first while the position is unknown. The
        values themselves are only requested when the window is not already
        covered. Transport failures end up in :attr:`last_error`.

        Returns:
            number of stored buckets
        """
        if not self._data_obj_id:
            return len(self._data)

        if self._location is None or not self._location.has_position:
            try:
                base_data = await transport.fetch_base_data(self._data_obj_id)
                self._apply_base_data(base_data)
            except TransportError as exc:
                self._record_transport_error(exc)
                return len(self._data)
            except (TypeError, ValueError, IndexError) as exc:
                self._record_transport_error(
                    TransportError(f"malformed base data: {exc}", transport.name, details={"id": self._data_obj_id})
                )
                return len(self._data)

        if self.covers(start, end):
            return len(self._data)

        try:
            rows = await transport.fetch_climate_by_id(self._data_obj_id, start, end, self._step)
        except TransportError as exc:
            self._record_transport_error(exc)
            return len(self._data)
        return self.load_records(rows)

    async def load_by_location_tag(
        self,
        transport: ClimateTransport,
        location: Location,
        tag: str | None,
        start: datetime,
        end: datetime,
    ) -> int:
        """Fetch values of the station nearest to ``location``, preferring ``tag``."""
        self._location = location
        if self.covers(start, end):
            return len(self._data)

        try:
            rows = await transport.fetch_climate_by_location_tag(location, tag, start, end, self._step)
        except TransportError as exc:
            self._record_transport_error(exc)
            return len(self._data)
        return self.load_records(rows)

    async def load_altitude(self, transport: ClimateTransport, location: Location | None = None) -> float | None:
        """Altitude of the station, fetched for ``location`` when not known yet.

        Returns ``None`` when no location is available or the request failed.
        """
        if self._location is not None and self._location.alt is not None:
            return self._location.alt

        if location is not None:
            self._location = location.model_copy()
        if self._location is None:
            return None

        try:
            altitude = await transport.fetch_altitude(self._location)
        except TransportError as exc:
            self._record_transport_error(exc)
            return None
        self._location.alt = altitude
        return altitude


__all__ = [
    "ID_COLUMN",
    "ITERATOR_COLUMN",
    "NAME_COLUMN",
    "UNINITIALIZED_NAME",
    "Climate",
    "CorrectionHook",
    "convert_time_step",
]
