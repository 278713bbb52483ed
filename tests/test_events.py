# Event bus tests: filtering by user / business and dropping lagging subscribers.

import asyncio
from datetime import date, datetime, timezone

from qnnect.events import EventBus, QueueEvent
from qnnect.models import QueueStatus
from qnnect.schemas import QueueEntryOut

def _event(user_id="u1", business_id="b1", kind="insert", number=1):
    entry = QueueEntryOut(
        id=f"e{number}",
        business_id=business_id,
        user_id=user_id,
        queue_number=number,
        service_day=date(2024, 5, 1),
        status=QueueStatus.waiting,
        estimated_wait_time=0,
        joined_at=datetime(2024, 5, 1, 9, tzinfo=timezone.utc),
    )
    return QueueEvent(kind=kind, entry=entry)

def test_filters_by_user_and_business():
    async def scenario():
        bus = EventBus()
        mine = bus.subscribe(user_id="u1")
        shop = bus.subscribe(business_id="b2")
        everything = bus.subscribe()

        assert bus.publish(_event(user_id="u1", business_id="b1")) == 2
        assert bus.publish(_event(user_id="u2", business_id="b2", number=2)) == 2

        assert (await mine.get()).entry.user_id == "u1"
        assert mine.queue.empty()
        assert (await shop.get()).entry.business_id == "b2"
        assert everything.queue.qsize() == 2

    asyncio.run(scenario())

def test_lagging_subscriber_is_dropped():
    async def scenario():
        bus = EventBus(maxsize=2)
        slow = bus.subscribe()
        for n in range(3):
            bus.publish(_event(number=n + 1))
        assert slow.lagged.is_set()
        assert bus.subscriber_count == 0
        # what was buffered is still readable
        assert (await slow.get()).entry.queue_number == 1

    asyncio.run(scenario())

def test_close_unsubscribes():
    bus = EventBus()
    sub = bus.subscribe(user_id="u1")
    sub.close()
    sub.close()
    assert bus.subscriber_count == 0
    assert bus.publish(_event()) == 0
