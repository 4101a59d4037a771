"""Name-keyed collection of locally loaded climates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import IO

from climaseries.core.binding import Culture
from climaseries.core.logging import get_logger
from climaseries.core.models import TimeStep
from climaseries.core.series import Climate

logger = get_logger(__name__)


class ClimateDb:
    """Holds climates by name, e.g. the stations referenced by a crop sequence.

    ``get_climate`` can be handed to the binder as the climate resolver.
    """

    def __init__(self) -> None:
        self._climates: dict[str, Climate] = {}

    def add_climate(
        self,
        source: IO[bytes] | Iterable[Mapping[str, str]],
        step: TimeStep,
        culture: Culture | None = None,
    ) -> int:
        """Load a climate from a CSV byte stream or an iterable of rows.

        A climate with the same name is replaced.

        Returns:
            number of climates in the collection
        """
        if hasattr(source, "read"):
            climate = Climate.from_stream(source, step, culture=culture)  # type: ignore[arg-type]
        else:
            climate = Climate.from_records(source, step, culture=culture)  # type: ignore[arg-type]
        if climate.last_error is not None:
            logger.warning(
                "climate added with partial data",
                climate=climate.name,
                count=len(climate),
                error_code=getattr(climate.last_error, "error_code", None),
            )
        return self.add(climate)

    def add(self, climate: Climate) -> int:
        """Insert a prebuilt climate under its name."""
        self._climates[climate.name] = climate
        return len(self._climates)

    def get_climate(self, name: str) -> Climate | None:
        return self._climates.get(name)

    def climate_names(self) -> list[str]:
        return list(self._climates)

    def __len__(self) -> int:
        return len(self._climates)

    def __contains__(self, name: object) -> bool:
        return name in self._climates
