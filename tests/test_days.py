# Unit tests for calendar-day helpers (service day, local day bounds, UTC normalization).
# Validates that numbering days follow the queue timezone rather than UTC.
# Ensures DST transition days produce 23h / 25h bounds.


from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from qnnect.utils.days import Interval, aware_utc, day_bounds_utc, local_hour, service_day

UTC = ZoneInfo("UTC")
CHICAGO = ZoneInfo("America/Chicago")

def dt(y, m, d, hh, mm=0, ss=0, tz=UTC):
    return datetime(y, m, d, hh, mm, ss, tzinfo=tz)

def test_aware_utc_naive_and_aware():
    naive = datetime(2024, 5, 1, 12, 0)
    assert aware_utc(naive) == dt(2024, 5, 1, 12)
    assert aware_utc(dt(2024, 5, 1, 7, tz=CHICAGO)) == dt(2024, 5, 1, 12)
    assert aware_utc(None) is None

def test_service_day_follows_queue_timezone():
    # 03:00 UTC on May 2nd is still May 1st evening in Chicago
    now = dt(2024, 5, 2, 3)
    assert service_day(now, UTC) == date(2024, 5, 2)
    assert service_day(now, CHICAGO) == date(2024, 5, 1)

def test_day_bounds_utc_plain_day():
    iv = day_bounds_utc(date(2024, 5, 1), CHICAGO)
    assert iv.start == dt(2024, 5, 1, 5)
    assert iv.end == dt(2024, 5, 2, 5)
    assert dt(2024, 5, 1, 23) in iv
    assert dt(2024, 5, 2, 5) not in iv

def test_day_bounds_utc_dst_days():
    spring = day_bounds_utc(date(2024, 3, 10), CHICAGO)
    fall = day_bounds_utc(date(2024, 11, 3), CHICAGO)
    assert spring.end - spring.start == timedelta(hours=23)
    assert fall.end - fall.start == timedelta(hours=25)

def test_interval_contains_naive_timestamp():
    iv = Interval(dt(2024, 1, 1, 0), dt(2024, 1, 2, 0))
    assert datetime(2024, 1, 1, 8) in iv

def test_local_hour():
    assert local_hour(dt(2024, 5, 1, 17), CHICAGO) == 12
    assert local_hour(datetime(2024, 5, 1, 17), UTC) == 17
