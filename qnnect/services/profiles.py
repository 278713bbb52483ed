# qnnect/services/profiles.py

# User profile lookups. Profiles are created lazily the first time an
# authenticated account shows up.

from __future__ import annotations
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.context import RequestContext
from qnnect.errors import NotFound
from qnnect.models import UserProfile
from qnnect.schemas import ProfileUpdate

logger = logging.getLogger(__name__)

async def ensure_profile(session: AsyncSession, ctx: RequestContext) -> UserProfile:
    profile = await session.get(UserProfile, ctx.user_id)
    if profile:
        return profile
    profile = UserProfile(id=ctx.user_id, full_name=ctx.display_name(), phone=None, notification_enabled=True)
    session.add(profile)
    try:
        await session.commit()
    except IntegrityError:
        # a concurrent first request inserted it between our read and write
        await session.rollback()
        return await session.get(UserProfile, ctx.user_id)
    logger.info("created profile for %s", ctx.user_id)
    return profile

async def update_profile(session: AsyncSession, user_id: str, changes: ProfileUpdate) -> UserProfile:
    profile = await session.get(UserProfile, user_id)
    if not profile:
        raise NotFound("profile not found")
    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(profile, key, value)
    await session.commit()
    return profile
