# qnnect/services/businesses.py

# Business registration and lookup. An account owns at most one business.

from __future__ import annotations
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.errors import Conflict, NotFound
from qnnect.models import Business
from qnnect.schemas import BusinessIn

logger = logging.getLogger(__name__)

async def list_businesses(session: AsyncSession) -> List[Business]:
    return list((await session.execute(select(Business).order_by(Business.name))).scalars().all())

async def get_business(session: AsyncSession, business_id: str) -> Business:
    business = await session.get(Business, business_id)
    if not business:
        raise NotFound("business not found")
    return business

async def find_owned_business(session: AsyncSession, owner_id: str) -> Business | None:
    return (await session.execute(
        select(Business).where(Business.owner_id == owner_id)
    )).scalar_one_or_none()

async def get_owned_business(session: AsyncSession, owner_id: str) -> Business:
    business = await find_owned_business(session, owner_id)
    if not business:
        raise NotFound("no business registered for this account")
    return business

async def create_business(session: AsyncSession, owner_id: str, data: BusinessIn) -> Business:
    if await find_owned_business(session, owner_id):
        raise Conflict("this account already owns a business")
    business = Business(owner_id=owner_id, **data.model_dump())
    session.add(business)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise Conflict("this account already owns a business") from e
    logger.info("registered business %s (%s) for owner %s", business.id, business.name, owner_id)
    return business
