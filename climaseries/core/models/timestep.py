"""Time step granularity and bucket normalisation."""

from __future__ import annotations

import calendar
from datetime import datetime
from enum import Enum


class TimeStep(str, Enum):
    """Resolution at which a climate series is indexed."""

    HOUR = "hour"
    DAY = "day"
    MONTH = "month"

    @property
    def rank(self) -> int:
        """Position in the ordering hour < day < month."""
        return _RANKS[self]

    def is_coarser_than(self, other: TimeStep) -> bool:
        return self.rank > other.rank


_RANKS = {TimeStep.HOUR: 0, TimeStep.DAY: 1, TimeStep.MONTH: 2}


def adjust_time_step(moment: datetime, step: TimeStep) -> datetime:
    """Truncate ``moment`` to the start of the bucket containing it."""

    step = TimeStep(step)
    if step is TimeStep.HOUR:
        return moment.replace(minute=0, second=0, microsecond=0)
    if step is TimeStep.DAY:
        return moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def days_in_month(moment: datetime) -> int:
    return calendar.monthrange(moment.year, moment.month)[1]


__all__ = ["TimeStep", "adjust_time_step", "days_in_month"]
