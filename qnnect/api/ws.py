# qnnect/api/ws.py

# Live queue streams.
# /ws/me/queue               → changes to the caller's own entries.
# /ws/businesses/mine/queue  → changes to the caller's business queue.
# On connect the socket gets a {"kind": "snapshot"} message with the open entries,
# then one {"kind": "insert"|"update", "entry": ...} message per committed change.
# A lagging subscriber is closed with 1013; reconnecting yields a fresh snapshot.

from __future__ import annotations
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.api.deps import get_bus, get_context
from qnnect.context import RequestContext
from qnnect.db import get_session
from qnnect.errors import NotFound
from qnnect.events import EventBus, Subscription
from qnnect.models import QueueEntry
from qnnect.schemas import QueueEntryOut, Snapshot
from qnnect.services.businesses import get_owned_business
from qnnect.services.queue import list_business_entries, list_user_entries

logger = logging.getLogger(__name__)

router = APIRouter()

POLICY_VIOLATION = 1008
TRY_AGAIN_LATER = 1013


def _snapshot(entries: List[QueueEntry]) -> dict:
    return Snapshot(entries=[QueueEntryOut.model_validate(e) for e in entries]).model_dump(mode="json")

async def _pump(websocket: WebSocket, sub: Subscription) -> None:
    while True:
        event = await sub.get()
        await websocket.send_json(event.model_dump(mode="json"))

async def _drain(websocket: WebSocket) -> None:
    # clients may send keepalives; anything else is ignored
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return

async def _stream(websocket: WebSocket, sub: Subscription, snapshot: dict) -> None:
    try:
        await websocket.send_json(snapshot)
        tasks = [
            asyncio.ensure_future(_pump(websocket, sub)),
            asyncio.ensure_future(_drain(websocket)),
            asyncio.ensure_future(sub.lagged.wait()),
        ]
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if sub.lagged.is_set():
            logger.warning("closing lagging stream user=%s business=%s", sub.user_id, sub.business_id)
            await websocket.close(code=TRY_AGAIN_LATER)
            return
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                raise exc
    finally:
        sub.close()


@router.websocket("/ws/me/queue")
async def my_queue_stream(
    websocket: WebSocket,
    ctx: RequestContext = Depends(get_context),
    session: AsyncSession = Depends(get_session),
    bus: EventBus = Depends(get_bus),
):
    if not ctx.authenticated:
        await websocket.close(code=POLICY_VIOLATION)
        return
    await websocket.accept()
    sub = bus.subscribe(user_id=ctx.user_id)
    rows = await list_user_entries(session, ctx.user_id)
    snapshot = _snapshot([entry for entry, _, _ in rows])
    # release the connection; the socket may stay open for hours
    await session.close()
    await _stream(websocket, sub, snapshot)


@router.websocket("/ws/businesses/mine/queue")
async def business_queue_stream(
    websocket: WebSocket,
    ctx: RequestContext = Depends(get_context),
    session: AsyncSession = Depends(get_session),
    bus: EventBus = Depends(get_bus),
):
    if not ctx.authenticated:
        await websocket.close(code=POLICY_VIOLATION)
        return
    try:
        business = await get_owned_business(session, ctx.user_id)
    except NotFound:
        await websocket.close(code=POLICY_VIOLATION)
        return
    await websocket.accept()
    sub = bus.subscribe(business_id=business.id)
    rows = await list_business_entries(session, business.id)
    snapshot = _snapshot([entry for entry, _, _ in rows])
    await session.close()
    await _stream(websocket, sub, snapshot)
