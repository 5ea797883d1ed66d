from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from lootbox.utils.dates import is_valid_timezone, local_today, next_local_midnight, resolve_zone

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_local_today():
    assert local_today(ZoneInfo("UTC"), NOW) == date(2026, 10, 19)
    assert local_today(ZoneInfo("Pacific/Auckland"), NOW) == date(2026, 10, 20)
    assert local_today(ZoneInfo("Pacific/Honolulu"), NOW) == date(2026, 10, 19)


def test_next_local_midnight():
    tz = ZoneInfo("Pacific/Auckland")
    nxt = next_local_midnight(tz, NOW)

    assert nxt == datetime(2026, 10, 21, tzinfo=tz)
    assert nxt > NOW


def test_next_midnight_across_dst_change():
    # Berlin leaves DST on 2026-10-25
    tz = ZoneInfo("Europe/Berlin")
    now = datetime(2026, 10, 25, 12, 0, tzinfo=timezone.utc)

    assert next_local_midnight(tz, now).utcoffset().total_seconds() == 3600


def test_is_valid_timezone():
    assert is_valid_timezone("Europe/Berlin")
    assert not is_valid_timezone("Europe/Atlantis")
    assert not is_valid_timezone("")
    assert not is_valid_timezone(None)


def test_resolve_zone_fallback():
    assert resolve_zone("Asia/Tokyo", "UTC") == ZoneInfo("Asia/Tokyo")
    assert resolve_zone("nope/nope", "UTC") == ZoneInfo("UTC")
    assert resolve_zone(None, "Europe/Berlin") == ZoneInfo("Europe/Berlin")
