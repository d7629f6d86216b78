"""Temporal classification of notes into time groups."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Optional

from gravity.constants.search import LAST_MONTH_DAYS, LAST_WEEK_DAYS, YESTERDAY_DAYS
from gravity.timestamps import parse_timestamp


class TimeGroup(str, Enum):
    """Time bucket a note falls into, relative to now."""

    YESTERDAY = "yesterday"
    LAST_WEEK = "last_week"
    LAST_MONTH = "last_month"
    EARLIER = "earlier"
    ALL = "all"


@dataclass(frozen=True)
class TemporalBoundaries:
    """Start instants of the yesterday, last week and last 30 days buckets."""

    yesterday: datetime
    last_week: datetime
    last_month: datetime


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def compute_boundaries(now: datetime) -> TemporalBoundaries:
    """Compute bucket boundaries for one operation.

    Each boundary is the start of day, in ``now``'s timezone, a fixed number
    of calendar days before ``now``. With a ``zoneinfo`` timezone the day
    arithmetic is done on wall-clock time, so a boundary on the far side of a
    daylight saving change still falls on local midnight. A naive ``now`` is
    read as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return TemporalBoundaries(
        yesterday=_start_of_day(now - timedelta(days=YESTERDAY_DAYS)),
        last_week=_start_of_day(now - timedelta(days=LAST_WEEK_DAYS)),
        last_month=_start_of_day(now - timedelta(days=LAST_MONTH_DAYS)),
    )


def classify(updated_at: Optional[str], boundaries: TemporalBoundaries) -> TimeGroup:
    """Assign a note's last update to a time group; first match wins."""
    moment = parse_timestamp(updated_at)
    if moment >= boundaries.yesterday:
        return TimeGroup.YESTERDAY
    if moment >= boundaries.last_week:
        return TimeGroup.LAST_WEEK
    if moment >= boundaries.last_month:
        return TimeGroup.LAST_MONTH
    return TimeGroup.EARLIER
