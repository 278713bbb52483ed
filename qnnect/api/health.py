# qnnect/api/health.py

# Health check endpoint.
# /healthz → verifies DB connectivity by running "SELECT 1" and reports live subscribers.

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from qnnect.api.deps import get_bus
from qnnect.db import get_session
from qnnect.events import EventBus

router = APIRouter()

@router.get("/healthz")
async def healthz(session: AsyncSession = Depends(get_session), bus: EventBus = Depends(get_bus)):
    await session.execute(text("SELECT 1"))
    return {"ok": True, "subscribers": bus.subscriber_count}
