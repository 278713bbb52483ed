# qnnect/api/businesses.py

# Business dashboard endpoints.
# /businesses → public directory (GET) and registration of the caller's business (POST).
# /businesses/mine[/queue|/stats] → the caller's business, its open entries and live counts.
# /businesses/mine/analytics → rolls a service day up into business_analytics.

from __future__ import annotations
from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.api.deps import require_user
from qnnect.config import settings
from qnnect.context import RequestContext
from qnnect.db import get_session
from qnnect.schemas import AnalyticsOut, BusinessIn, BusinessOut, BusinessQueueEntry, QueueEntryOut, QueueStats
from qnnect.services.businesses import create_business, get_owned_business, list_businesses
from qnnect.services.queue import list_business_entries
from qnnect.services.stats import queue_stats, rollup_day
from qnnect.utils.days import service_day

router = APIRouter()

@router.get("/businesses", response_model=List[BusinessOut])
async def directory(session: AsyncSession = Depends(get_session)):
    return await list_businesses(session)

@router.post("/businesses", response_model=BusinessOut, status_code=201)
async def register(
    data: BusinessIn,
    ctx: RequestContext = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    return await create_business(session, ctx.user_id, data)

@router.get("/businesses/mine", response_model=BusinessOut)
async def my_business(ctx: RequestContext = Depends(require_user), session: AsyncSession = Depends(get_session)):
    return await get_owned_business(session, ctx.user_id)

@router.get("/businesses/mine/queue", response_model=List[BusinessQueueEntry])
async def my_business_queue(ctx: RequestContext = Depends(require_user), session: AsyncSession = Depends(get_session)):
    business = await get_owned_business(session, ctx.user_id)
    rows = await list_business_entries(session, business.id)
    return [
        BusinessQueueEntry(**QueueEntryOut.model_validate(entry).model_dump(), full_name=full_name, phone=phone)
        for entry, full_name, phone in rows
    ]

@router.get("/businesses/mine/stats", response_model=QueueStats)
async def my_business_stats(ctx: RequestContext = Depends(require_user), session: AsyncSession = Depends(get_session)):
    business = await get_owned_business(session, ctx.user_id)
    rows = await list_business_entries(session, business.id)
    return await queue_stats(session, business, [entry for entry, _, _ in rows])

@router.post("/businesses/mine/analytics", response_model=AnalyticsOut)
async def my_business_rollup(
    day: Optional[date] = None,
    ctx: RequestContext = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    business = await get_owned_business(session, ctx.user_id)
    day = day or service_day(datetime.now(timezone.utc), settings.tz)
    return await rollup_day(session, business.id, day)
