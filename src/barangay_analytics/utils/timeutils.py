"""Wall-clock helpers; the engine works on naive local timestamps."""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo


def resolve_timezone(name: str) -> tzinfo:
    return ZoneInfo(name)


def to_local(value: datetime, tz: tzinfo) -> datetime:
    """Convert an aware timestamp to naive local time; naive input is kept as is."""

    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def local_now(tz: tzinfo) -> datetime:
    return datetime.now(tz).replace(tzinfo=None)


def week_start(now: datetime) -> datetime:
    """Midnight of the Sunday that opens the calendar week containing ``now``."""

    days_since_sunday = (now.weekday() + 1) % 7
    start = now - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)
