# qnnect/api/session.py

# Session bootstrap and profile endpoints.
# /session → which view to render for (authenticated?, portal); creates the profile on first visit.
# /me/profile → read / update the caller's profile.

from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qnnect.api.deps import get_context, require_user
from qnnect.context import Portal, RequestContext, resolve_view
from qnnect.db import get_session
from qnnect.schemas import ProfileOut, ProfileUpdate, SessionOut
from qnnect.services.profiles import ensure_profile, update_profile

router = APIRouter()

@router.get("/session", response_model=SessionOut)
async def bootstrap(
    portal: Optional[Portal] = None,
    ctx: RequestContext = Depends(get_context),
    session: AsyncSession = Depends(get_session),
):
    view = resolve_view(ctx.authenticated, portal)
    if not ctx.authenticated:
        return SessionOut(view=view)
    profile = await ensure_profile(session, ctx)
    return SessionOut(view=view, user_id=ctx.user_id, profile=ProfileOut.model_validate(profile))

@router.get("/me/profile", response_model=ProfileOut)
async def my_profile(ctx: RequestContext = Depends(require_user), session: AsyncSession = Depends(get_session)):
    return await ensure_profile(session, ctx)

@router.patch("/me/profile", response_model=ProfileOut)
async def edit_profile(
    changes: ProfileUpdate,
    ctx: RequestContext = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    await ensure_profile(session, ctx)
    return await update_profile(session, ctx.user_id, changes)
