# qnnect/utils/days.py

# Calendar-day helpers for queue numbering and "today" stats.
# A service day is a local calendar date in the configured queue timezone.
# Bounds are returned as UTC intervals so they can be compared against stored timestamps.
# SQLite hands back naive datetimes; aware_utc() normalizes them to UTC-aware.

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")

@dataclass(frozen=True)
class Interval:
    start: datetime
    end: datetime

    def __contains__(self, ts: datetime) -> bool:
        return self.start <= aware_utc(ts) < self.end

def aware_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize datetime to UTC-aware.
    - If naive, assume it's already in UTC and attach tzinfo.
    - If aware, convert to UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)

def service_day(now: datetime, tz: ZoneInfo) -> date:
    """Local calendar date of `now` in the queue timezone."""
    return aware_utc(now).astimezone(tz).date()

def day_bounds_utc(day: date, tz: ZoneInfo) -> Interval:
    """
    UTC interval [local midnight, next local midnight) for `day`.
    DST days come out as 23 or 25 hours long.
    """
    start_local = datetime.combine(day, time(0, 0)).replace(tzinfo=tz)
    end_local   = datetime.combine(day + timedelta(days=1), time(0, 0)).replace(tzinfo=tz)
    return Interval(start_local.astimezone(UTC), end_local.astimezone(UTC))

def local_hour(ts: datetime, tz: ZoneInfo) -> int:
    return aware_utc(ts).astimezone(tz).hour
