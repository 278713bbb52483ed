# qnnect/events.py

# In-process change channel for queue entries.
# Each event carries the full changed entry so dashboards update incrementally.
# Subscribers filter by user_id or business_id; a subscriber that falls behind
# (buffer full) is dropped and told so, and must reconnect to get a fresh snapshot.

from __future__ import annotations
import asyncio
import logging
from typing import List, Literal, Optional

from pydantic import BaseModel

from qnnect.schemas import QueueEntryOut

logger = logging.getLogger(__name__)


class QueueEvent(BaseModel):
    kind: Literal["insert", "update"]
    entry: QueueEntryOut


class Subscription:
    def __init__(self, bus: "EventBus", user_id: Optional[str], business_id: Optional[str], maxsize: int):
        self._bus = bus
        self.user_id = user_id
        self.business_id = business_id
        self.queue: asyncio.Queue[QueueEvent] = asyncio.Queue(maxsize=maxsize)
        self.lagged = asyncio.Event()

    def matches(self, event: QueueEvent) -> bool:
        if self.user_id is not None and event.entry.user_id != self.user_id:
            return False
        if self.business_id is not None and event.entry.business_id != self.business_id:
            return False
        return True

    async def get(self) -> QueueEvent:
        return await self.queue.get()

    def close(self) -> None:
        self._bus.unsubscribe(self)


class EventBus:
    def __init__(self, maxsize: int = 100):
        self.maxsize = maxsize
        self._subs: List[Subscription] = []

    def subscribe(self, user_id: Optional[str] = None, business_id: Optional[str] = None) -> Subscription:
        sub = Subscription(self, user_id, business_id, self.maxsize)
        self._subs.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        if sub in self._subs:
            self._subs.remove(sub)

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)

    def publish(self, event: QueueEvent) -> int:
        """Fan out to matching subscribers; returns how many received it."""
        delivered = 0
        for sub in list(self._subs):
            if not sub.matches(event):
                continue
            try:
                sub.queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("dropping lagging subscriber user=%s business=%s", sub.user_id, sub.business_id)
                self.unsubscribe(sub)
                sub.lagged.set()
        return delivered
