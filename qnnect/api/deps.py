# qnnect/api/deps.py

# Shared FastAPI dependencies: caller identity and the process-wide event bus.
# Identity is asserted by the upstream auth provider via X-User-* headers.

from typing import Optional

from fastapi import Depends, Header, HTTPException

from qnnect.config import settings
from qnnect.context import RequestContext
from qnnect.events import EventBus

bus = EventBus(maxsize=settings.EVENT_BUFFER_SIZE)

def get_bus() -> EventBus:
    return bus

def get_context(
    x_user_id: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
) -> RequestContext:
    return RequestContext(user_id=x_user_id or None, full_name=x_user_name, email=x_user_email)

def require_user(ctx: RequestContext = Depends(get_context)) -> RequestContext:
    if not ctx.authenticated:
        raise HTTPException(status_code=401, detail="missing X-User-Id")
    return ctx
