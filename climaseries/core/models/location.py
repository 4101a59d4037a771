"""Geographic location of a climate station."""

from pydantic import BaseModel


class Location(BaseModel):
    """Longitude/latitude in decimal degrees, altitude in metres.

    Every coordinate is optional so a location can be filled in lazily, e.g.
    when the station metadata arrives after the series itself.
    """

    lon: float | None = None
    lat: float | None = None
    alt: float | None = None

    @property
    def has_position(self) -> bool:
        return self.lon is not None and self.lat is not None

    @property
    def is_complete(self) -> bool:
        return self.has_position and self.alt is not None
