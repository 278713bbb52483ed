# qnnect/services/queue.py

# Queue workflow: join, advance (business side), cancel (user side) and listings.
# Join reserves its number, counts the waiting entries and inserts the new entry
# in a single transaction, so number and wait estimate agree with what was committed.
# Every committed change is published to the event bus with the full entry.

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from qnnect.config import settings
from qnnect.errors import Forbidden, InvalidTransition, NotFound, QueueFull
from qnnect.events import EventBus, QueueEvent
from qnnect.models import Business, QueueEntry, QueueStatus, UserProfile
from qnnect.schemas import QueueEntryOut
from qnnect.services.numbering import reserve_number
from qnnect.utils.days import aware_utc, service_day
from qnnect.utils.transitions import ACTIVE, check_transition

logger = logging.getLogger(__name__)

# statuses a business may push an entry to; cancel goes through cancel_entry
ADVANCE_TARGETS = frozenset({QueueStatus.serving, QueueStatus.completed})


def _now(now: Optional[datetime]) -> datetime:
    return aware_utc(now) if now else datetime.now(timezone.utc)

def _publish(bus: Optional[EventBus], kind: str, entry: QueueEntry) -> None:
    if bus is not None:
        bus.publish(QueueEvent(kind=kind, entry=QueueEntryOut.model_validate(entry)))

async def waiting_count(session: AsyncSession, business_id: str) -> int:
    return (await session.execute(
        select(func.count(QueueEntry.id))
        .where(QueueEntry.business_id == business_id)
        .where(QueueEntry.status == QueueStatus.waiting)
    )).scalar_one()

async def get_entry(session: AsyncSession, entry_id: str) -> QueueEntry:
    entry = await session.get(QueueEntry, entry_id)
    if not entry:
        raise NotFound("queue entry not found")
    return entry


async def _apply_transition(session: AsyncSession, entry: QueueEntry, target: QueueStatus, **stamps) -> None:
    """Move `entry` to `target` only if the stored status is still the one checked here."""
    current = QueueStatus(entry.status)
    check_transition(current, target)
    values = dict(stamps, status=target)
    result = await session.execute(
        update(QueueEntry)
        .where(QueueEntry.id == entry.id)
        .where(QueueEntry.status == current)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # another request moved the entry after we loaded it
        await session.rollback()
        raise InvalidTransition(current.value, target.value)
    await session.commit()
    for key, value in values.items():
        set_committed_value(entry, key, value)


async def join_queue(
    session: AsyncSession,
    business_id: str,
    user_id: str,
    notes: str = "",
    now: Optional[datetime] = None,
    bus: Optional[EventBus] = None,
) -> QueueEntry:
    now = _now(now)
    day = service_day(now, settings.tz)
    try:
        business = await session.get(Business, business_id)
        if not business:
            raise NotFound("business not found")

        number = await reserve_number(session, business.id, day)
        if number > business.max_daily_capacity:
            raise QueueFull(f"{business.name} has reached its daily capacity of {business.max_daily_capacity}")

        waiting = await waiting_count(session, business.id)
        entry = QueueEntry(
            business_id=business.id,
            user_id=user_id,
            queue_number=number,
            service_day=day,
            status=QueueStatus.waiting,
            estimated_wait_time=waiting * business.avg_service_time,
            joined_at=now,
            notes=notes,
        )
        session.add(entry)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info("user %s joined %s as #%d (est. %d min)", user_id, business_id, entry.queue_number, entry.estimated_wait_time)
    _publish(bus, "insert", entry)
    return entry


async def advance_entry(
    session: AsyncSession,
    entry_id: str,
    target: QueueStatus,
    owner_id: str,
    now: Optional[datetime] = None,
    bus: Optional[EventBus] = None,
) -> QueueEntry:
    now = _now(now)
    target = QueueStatus(target)
    entry = await get_entry(session, entry_id)
    business = await session.get(Business, entry.business_id)
    if business is None or business.owner_id != owner_id:
        raise Forbidden("entry does not belong to your business")
    if target not in ADVANCE_TARGETS:
        raise InvalidTransition(QueueStatus(entry.status).value, target.value)

    if target == QueueStatus.serving:
        await _apply_transition(session, entry, target, called_at=now)
    else:
        await _apply_transition(session, entry, target, completed_at=now)

    logger.info("entry %s (#%d at %s) -> %s", entry.id, entry.queue_number, entry.business_id, target.value)
    _publish(bus, "update", entry)
    return entry


async def cancel_entry(
    session: AsyncSession,
    entry_id: str,
    user_id: str,
    bus: Optional[EventBus] = None,
) -> QueueEntry:
    entry = await get_entry(session, entry_id)
    if entry.user_id != user_id:
        raise Forbidden("entry belongs to another user")
    await _apply_transition(session, entry, QueueStatus.cancelled)

    logger.info("entry %s (#%d at %s) cancelled by user", entry.id, entry.queue_number, entry.business_id)
    _publish(bus, "update", entry)
    return entry


async def queue_position(session: AsyncSession, entry: QueueEntry) -> int:
    """1-based rank among the business's waiting entries; 0 if not waiting."""
    if entry.status != QueueStatus.waiting:
        return 0
    return (await session.execute(
        select(func.count(QueueEntry.id))
        .where(QueueEntry.business_id == entry.business_id)
        .where(QueueEntry.status == QueueStatus.waiting)
        .where(or_(
            QueueEntry.service_day < entry.service_day,
            and_(QueueEntry.service_day == entry.service_day, QueueEntry.queue_number <= entry.queue_number),
        ))
    )).scalar_one()


async def list_user_entries(session: AsyncSession, user_id: str) -> List[Tuple[QueueEntry, Business, int]]:
    """Active entries for a user, newest first, with business and live position."""
    rows = (await session.execute(
        select(QueueEntry, Business)
        .join(Business, Business.id == QueueEntry.business_id)
        .where(QueueEntry.user_id == user_id)
        .where(QueueEntry.status.in_(ACTIVE))
        .order_by(QueueEntry.joined_at.desc())
    )).all()
    out = []
    for entry, business in rows:
        out.append((entry, business, await queue_position(session, entry)))
    return out


async def list_business_entries(
    session: AsyncSession, business_id: str
) -> List[Tuple[QueueEntry, Optional[str], Optional[str]]]:
    """Active entries for a business in queue order, with the user's name and phone."""
    rows = (await session.execute(
        select(QueueEntry, UserProfile.full_name, UserProfile.phone)
        .outerjoin(UserProfile, UserProfile.id == QueueEntry.user_id)
        .where(QueueEntry.business_id == business_id)
        .where(QueueEntry.status.in_(ACTIVE))
        .order_by(QueueEntry.service_day, QueueEntry.queue_number)
    )).all()
    return [(entry, full_name, phone) for entry, full_name, phone in rows]
