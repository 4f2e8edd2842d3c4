"""Clock and timestamp conversions for the alert engine.

Alert timestamps, bill due dates and budget periods are all read in one
configured zone (``APP_TIMEZONE``). Stored values are naive datetimes in that
zone.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pfm_api.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``; unknown or empty names mean UTC."""

    name = (get_settings().app_timezone or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r; evaluating alerts in UTC", name)
        return timezone.utc


def now_in_app_timezone() -> datetime:
    """Clock used to stamp notifications and ``last_triggered_at``."""

    return datetime.now(tz=get_app_timezone())


def today_in_app_timezone() -> date:
    """Reference day for bill projections and budget periods."""

    return now_in_app_timezone().date()


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Attach the app zone to a stored naive value, or convert an aware one."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Convert ``value`` to the naive app-zone form written to the store."""

    if value is None:
        return None
    return ensure_app_timezone(value).replace(tzinfo=None)


def local_day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Stored datetimes for the first and last instant of an inclusive day range."""

    return datetime.combine(start, time.min), datetime.combine(end, time.max)
