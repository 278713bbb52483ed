# qnnect/services/stats.py

# Business dashboard numbers and the daily analytics rollup.
# Live stats are derived on demand: waiting/serving from the open entries,
# completed_today from a count query, avg wait = configured avg_service_time.
# The rollup loads one service day of entries into a DataFrame and upserts a
# business_analytics row with served/cancelled totals, mean observed wait and peak hour.


from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional

import pandas as pd
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.config import settings
from qnnect.models import Business, BusinessAnalytics, QueueEntry, QueueStatus
from qnnect.schemas import QueueStats
from qnnect.utils.days import aware_utc, day_bounds_utc, service_day

logger = logging.getLogger(__name__)

async def completed_today(session: AsyncSession, business_id: str, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    start = day_bounds_utc(service_day(now, settings.tz), settings.tz).start
    return (await session.execute(
        select(func.count(QueueEntry.id))
        .where(QueueEntry.business_id == business_id)
        .where(QueueEntry.status == QueueStatus.completed)
        .where(QueueEntry.joined_at >= start)
    )).scalar_one()

async def queue_stats(
    session: AsyncSession,
    business: Business,
    open_entries: Iterable[QueueEntry],
    now: Optional[datetime] = None,
) -> QueueStats:
    statuses = [QueueStatus(e.status) for e in open_entries]
    return QueueStats(
        waiting=statuses.count(QueueStatus.waiting),
        serving=statuses.count(QueueStatus.serving),
        completed_today=await completed_today(session, business.id, now),
        avg_wait_time=business.avg_service_time,
    )


def summarize_day(entries: Iterable[QueueEntry], tz=None) -> dict:
    """Return served/cancelled totals, mean minutes from join to call, and busiest join hour."""
    tz = tz or settings.tz
    df = pd.DataFrame(
        [
            {"status": QueueStatus(e.status).value, "joined_at": aware_utc(e.joined_at), "called_at": aware_utc(e.called_at)}
            for e in entries
        ],
        columns=["status", "joined_at", "called_at"],
    )
    if df.empty:
        return {"total_served": 0, "total_cancelled": 0, "avg_wait_time": 0.0, "peak_hour": 0}

    joined = pd.to_datetime(df["joined_at"], utc=True)
    called = pd.to_datetime(df["called_at"], utc=True)

    waits = ((called - joined).dt.total_seconds() / 60.0).dropna()
    hours = joined.dt.tz_convert(str(tz)).dt.hour
    counts = hours.value_counts()

    return {
        "total_served": int((df["status"] == QueueStatus.completed.value).sum()),
        "total_cancelled": int((df["status"] == QueueStatus.cancelled.value).sum()),
        "avg_wait_time": round(float(waits.mean()), 2) if not waits.empty else 0.0,
        "peak_hour": int(counts[counts == counts.max()].index.min()),
    }


async def rollup_day(session: AsyncSession, business_id: str, day: date) -> BusinessAnalytics:
    entries = (await session.execute(
        select(QueueEntry)
        .where(QueueEntry.business_id == business_id)
        .where(QueueEntry.service_day == day)
    )).scalars().all()
    summary = summarize_day(entries)

    row = (await session.execute(
        select(BusinessAnalytics)
        .where(BusinessAnalytics.business_id == business_id)
        .where(BusinessAnalytics.date == day)
    )).scalar_one_or_none()
    if row is None:
        row = BusinessAnalytics(business_id=business_id, date=day)
        session.add(row)
    for key, value in summary.items():
        setattr(row, key, value)
    await session.commit()

    logger.info("analytics %s %s: %s", business_id, day.isoformat(), summary)
    return row
