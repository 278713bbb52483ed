# Daily rollup tests: summarize_day on plain objects, then rollup_day against SQLite.
# Verifies served/cancelled totals, mean join-to-call wait, peak hour and upsert behaviour.

import asyncio
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from zoneinfo import ZoneInfo

from sqlalchemy import func, select

from qnnect.models import BusinessAnalytics, QueueStatus
from qnnect.schemas import BusinessIn
from qnnect.services.businesses import create_business
from qnnect.services.queue import advance_entry, cancel_entry, join_queue
from qnnect.services.stats import rollup_day, summarize_day

UTC = timezone.utc

def e(status, joined, called=None):
    return SimpleNamespace(status=status, joined_at=joined, called_at=called)

def test_summarize_empty_day():
    assert summarize_day([]) == {"total_served": 0, "total_cancelled": 0, "avg_wait_time": 0.0, "peak_hour": 0}

def test_summarize_mixed_day():
    t = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
    entries = [
        e(QueueStatus.completed, t, t + timedelta(minutes=10)),
        e(QueueStatus.completed, t + timedelta(minutes=5), t + timedelta(minutes=25)),
        e(QueueStatus.cancelled, t + timedelta(hours=2)),
        e(QueueStatus.waiting, t + timedelta(minutes=30)),
        e(QueueStatus.serving, t + timedelta(hours=2, minutes=5), t + timedelta(hours=2, minutes=10)),
    ]
    out = summarize_day(entries, tz=ZoneInfo("UTC"))
    assert out["total_served"] == 2
    assert out["total_cancelled"] == 1
    # (10 + 20 + 5) / 3
    assert abs(out["avg_wait_time"] - 11.67) < 1e-6
    assert out["peak_hour"] == 9

def test_summarize_peak_hour_in_local_time_and_naive_input():
    # naive timestamps are UTC (as SQLite returns them)
    joined = [datetime(2024, 5, 1, 17, m) for m in (0, 10, 20)] + [datetime(2024, 5, 1, 15, 0)]
    out = summarize_day([e(QueueStatus.waiting, j) for j in joined], tz=ZoneInfo("America/Chicago"))
    assert out["peak_hour"] == 12
    assert out["avg_wait_time"] == 0.0

def test_summarize_tie_picks_earliest_hour():
    joined = [datetime(2024, 5, 1, 14, tzinfo=UTC), datetime(2024, 5, 1, 11, tzinfo=UTC)]
    assert summarize_day([e(QueueStatus.waiting, j) for j in joined], tz=ZoneInfo("UTC"))["peak_hour"] == 11

def test_rollup_day_upserts(session_factory):
    t0 = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)

    async def scenario():
        async with session_factory() as s:
            biz = await create_business(s, "owner-1", BusinessIn(name="Diner", type="restaurant"))
            a = await join_queue(s, biz.id, "a", now=t0)
            b = await join_queue(s, biz.id, "b", now=t0 + timedelta(minutes=1))
            await advance_entry(s, a.id, QueueStatus.serving, "owner-1", now=t0 + timedelta(minutes=12))
            await advance_entry(s, a.id, QueueStatus.completed, "owner-1", now=t0 + timedelta(minutes=20))

            first = await rollup_day(s, biz.id, date(2024, 5, 1))
            assert (first.total_served, first.total_cancelled) == (1, 0)
            assert first.avg_wait_time == 12.0
            assert first.peak_hour == 9

            await cancel_entry(s, b.id, "b")
            second = await rollup_day(s, biz.id, date(2024, 5, 1))
            assert second.total_cancelled == 1

            rows = (await s.execute(select(func.count(BusinessAnalytics.id)))).scalar_one()
            assert rows == 1

            empty = await rollup_day(s, biz.id, date(2024, 5, 2))
            assert empty.total_served == 0 and empty.peak_hour == 0

    asyncio.run(scenario())
