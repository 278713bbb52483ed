# qnnect/api/queue.py

# Queue endpoints.
# POST /businesses/{id}/queue → join; GET /me/queue → caller's open entries with position.
# POST /queue/{id}/advance → owner moves an entry to serving/completed.
# POST /queue/{id}/cancel  → the entry's user cancels it.

from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.api.deps import get_bus, require_user
from qnnect.context import RequestContext
from qnnect.db import get_session
from qnnect.events import EventBus
from qnnect.schemas import AdvanceIn, BusinessOut, JoinIn, MyQueueEntry, QueueEntryOut
from qnnect.services.queue import advance_entry, cancel_entry, join_queue, list_user_entries

router = APIRouter()

@router.post("/businesses/{business_id}/queue", response_model=QueueEntryOut, status_code=201)
async def join(
    business_id: str,
    body: JoinIn | None = None,
    ctx: RequestContext = Depends(require_user),
    session: AsyncSession = Depends(get_session),
    bus: EventBus = Depends(get_bus),
):
    notes = body.notes if body else ""
    return await join_queue(session, business_id, ctx.user_id, notes=notes, bus=bus)

@router.get("/me/queue", response_model=List[MyQueueEntry])
async def my_queue(ctx: RequestContext = Depends(require_user), session: AsyncSession = Depends(get_session)):
    rows = await list_user_entries(session, ctx.user_id)
    return [
        MyQueueEntry(
            **QueueEntryOut.model_validate(entry).model_dump(),
            position=position,
            business=BusinessOut.model_validate(business),
        )
        for entry, business, position in rows
    ]

@router.post("/queue/{entry_id}/advance", response_model=QueueEntryOut)
async def advance(
    entry_id: str,
    body: AdvanceIn,
    ctx: RequestContext = Depends(require_user),
    session: AsyncSession = Depends(get_session),
    bus: EventBus = Depends(get_bus),
):
    return await advance_entry(session, entry_id, body.status, owner_id=ctx.user_id, bus=bus)

@router.post("/queue/{entry_id}/cancel", response_model=QueueEntryOut)
async def cancel(
    entry_id: str,
    ctx: RequestContext = Depends(require_user),
    session: AsyncSession = Depends(get_session),
    bus: EventBus = Depends(get_bus),
):
    return await cancel_entry(session, entry_id, ctx.user_id, bus=bus)
