"""Base class of all bindable records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from climaseries.core.binding import Culture, RecordSchema, Resolvers, bind_record


class BoundRecord(BaseModel):
    """Immutable record populated from a flat row.

    Subclasses declare their fields twice: as pydantic attributes (types,
    defaults) and in ``FIELDS`` (how each one is read from a row).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    FIELDS: ClassVar[RecordSchema]

    @classmethod
    def parse(
        cls,
        values: Mapping[str, str],
        *,
        name_map: Mapping[str, str] | None = None,
        resolvers: Resolvers | None = None,
        culture: Culture | None = None,
    ):
        """Bind ``values`` and return the record, dropping diagnostics."""
        return bind_record(cls, values, name_map=name_map, resolvers=resolvers, culture=culture).record
