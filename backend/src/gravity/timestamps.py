"""Tolerant parsing of stored ISO-8601 timestamps and local timezone lookup."""

import logging
import os
from datetime import UTC, datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

LOCALTIME_FILE = "/etc/localtime"


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 timestamp, degrading to the epoch.

    Missing or unparseable values map to the Unix epoch so that a bad row
    sorts last and lands in the earlier bucket. Naive values are read as UTC.
    """
    if not value:
        return EPOCH
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def sort_key(value: Optional[str]) -> float:
    """Seconds since the epoch for ordering notes by when they happened."""
    return parse_timestamp(value).timestamp()


def load_zone(name: str) -> ZoneInfo:
    """Look up an IANA zone name.

    Raises:
        ValueError: If the name is not a known zone.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name!r}") from e


def local_timezone(name: str = "") -> tzinfo:
    """Resolve the zone used for day boundaries.

    Order: the given name, the ``TZ`` environment variable, the system
    zone file. A fixed-offset zone is the last resort and does not follow
    daylight saving changes.
    """
    if name:
        return load_zone(name)

    env_name = os.getenv("TZ", "").lstrip(":")
    if env_name:
        try:
            return load_zone(env_name)
        except ValueError as e:
            logger.warning(f"Ignoring TZ environment variable: {e}")

    try:
        with open(LOCALTIME_FILE, "rb") as f:
            return ZoneInfo.from_file(f, key="localtime")
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read system timezone, using fixed offset: {e}")
    return datetime.now().astimezone().tzinfo or UTC
