"""Culture-aware parsing of numbers and dates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from dateutil import parser as dtparse
from dateutil import tz

from climaseries.core.exceptions import ConfigurationError

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True, slots=True)
class Culture:
    """Number and date conventions of a record source."""

    name: str
    decimal_separator: str = "."
    group_separators: tuple[str, ...] = (",",)
    dayfirst: bool = False

    def parse_float(self, value: str) -> float:
        """Parse a decimal number written in this culture.

        Group separators are dropped wherever they appear.

        Raises:
            ValueError: the text is not a number in this culture
        """
        text = value.strip()
        if "_" in text:
            raise ValueError(f"could not convert string to float: {value!r}")
        for separator in self.group_separators:
            text = text.replace(separator, "")
        if self.decimal_separator != ".":
            text = text.replace(self.decimal_separator, ".")
        return float(text)

    def parse_datetime(self, value: str) -> datetime:
        """Parse a date/time written in this culture.

        ISO 8601 text is read as such in every culture; ``dayfirst`` would
        otherwise swap its month and day. Times with an offset come back as
        naive UTC.

        Raises:
            ValueError: the text is not a date
        """
        text = value.strip()
        if _ISO_DATE.match(text):
            moment = datetime.fromisoformat(text)
        else:
            try:
                moment = dtparse.parse(text, dayfirst=self.dayfirst)
            except OverflowError as exc:
                raise ValueError(str(exc)) from exc
        if moment.tzinfo is not None:
            moment = moment.astimezone(tz.UTC).replace(tzinfo=None)
        return moment

    @classmethod
    def from_name(cls, name: str | None) -> Culture:
        """Return a known culture, ``None`` or ``""`` meaning invariant."""
        key = (name or "invariant").strip()
        culture = _CULTURES.get(key) or _CULTURES.get(key.lower())
        if culture is None:
            raise ConfigurationError(f"unknown culture '{name}'", {"known": sorted(_CULTURES)})
        return culture


INVARIANT = Culture(name="invariant")

_CULTURES: dict[str, Culture] = {
    "invariant": INVARIANT,
    "en-US": Culture(name="en-US"),
    "en-GB": Culture(name="en-GB", dayfirst=True),
    "de-DE": Culture(name="de-DE", decimal_separator=",", group_separators=(".",), dayfirst=True),
    "fr-FR": Culture(
        name="fr-FR",
        decimal_separator=",",
        group_separators=(" ", "\u00a0", "\u202f"),
        dayfirst=True,
    ),
}


__all__ = ["INVARIANT", "Culture"]
