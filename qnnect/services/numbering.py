# qnnect/services/numbering.py

# Atomic queue-number reservation backed by the queue_counters table.
# One statement upserts the (business, day) counter and returns the new value,
# so concurrent joins can never be handed the same number.
# Must run inside the caller's transaction; the number is only consumed on commit.

from __future__ import annotations
from datetime import date

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.models import QueueCounter

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

async def reserve_number(session: AsyncSession, business_id: str, day: date) -> int:
    dialect = session.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        return await _reserve_locked(session, business_id, day)

    stmt = (
        insert(QueueCounter)
        .values(business_id=business_id, service_day=day, last_number=1)
        .on_conflict_do_update(
            index_elements=["business_id", "service_day"],
            set_={"last_number": QueueCounter.last_number + 1},
        )
        .returning(QueueCounter.last_number)
    )
    return (await session.execute(stmt)).scalar_one()

async def _reserve_locked(session: AsyncSession, business_id: str, day: date) -> int:
    """Fallback for backends without INSERT .. ON CONFLICT: row lock, then increment."""
    counter = (await session.execute(
        select(QueueCounter)
        .where(QueueCounter.business_id == business_id)
        .where(QueueCounter.service_day == day)
        .with_for_update()
    )).scalar_one_or_none()
    if counter is None:
        counter = QueueCounter(business_id=business_id, service_day=day, last_number=0)
        session.add(counter)
    counter.last_number += 1
    await session.flush()
    return counter.last_number
