"""Calendar-day helpers shared by the streak and decay rules.

Stored timestamps are UTC. Naive values (SQLite drops tzinfo) are read as UTC.
Day boundaries are taken in the configured application time zone.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from mockera.core.config import settings


def app_tz() -> ZoneInfo:
    return ZoneInfo(str(settings.app_timezone or "UTC"))


def as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_utc(value: datetime) -> datetime:
    return as_aware(value).astimezone(timezone.utc)


def calendar_day(value: datetime, tz: ZoneInfo | None = None) -> date:
    return as_aware(value).astimezone(tz or app_tz()).date()


def day_start(value: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Midnight of `value`'s calendar day, as a UTC timestamp."""
    zone = tz or app_tz()
    local_midnight = datetime.combine(calendar_day(value, zone), time.min, tzinfo=zone)
    return local_midnight.astimezone(timezone.utc)


def days_between(earlier: datetime, later: datetime, tz: ZoneInfo | None = None) -> int:
    """Whole calendar days from `earlier` to `later`; negative under clock skew."""
    zone = tz or app_tz()
    return (calendar_day(later, zone) - calendar_day(earlier, zone)).days
