# lootbox/utils/dates.py
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

log = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_timezone(name: str | None) -> bool:
    if not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def resolve_zone(name: str | None, fallback: str) -> ZoneInfo:
    """
    User preference first, `fallback` (DEFAULT_TIMEZONE) otherwise.
    A stored name that no longer resolves falls back too.
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            log.warning("Unknown user timezone %r, using %s", name, fallback)
    return ZoneInfo(fallback)


def local_today(tz: ZoneInfo, now: datetime) -> date:
    return now.astimezone(tz).date()


def next_local_midnight(tz: ZoneInfo, now: datetime) -> datetime:
    # start of the next calendar day in tz, tz-aware
    tomorrow = local_today(tz, now) + timedelta(days=1)
    return datetime.combine(tomorrow, time.min, tzinfo=tz)
