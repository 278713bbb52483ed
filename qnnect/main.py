# qnnect/main.py

# FastAPI application entrypoint for the Qnnect virtual queue service.
# Includes health, session, business, queue and websocket routers, and sets up tables on startup.
# Domain errors from the service layer are turned into JSON responses with their HTTP status.
# Root endpoint shows available API routes for quick reference.

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from qnnect.api.health import router as health_router
from qnnect.api.session import router as session_router
from qnnect.api.businesses import router as businesses_router
from qnnect.api.queue import router as queue_router
from qnnect.api.ws import router as ws_router
from qnnect.config import settings
from qnnect.db import Base, engine
from qnnect.errors import QnnectError
import qnnect.models  # important: registers tables

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Qnnect", version="0.1.0")
app.include_router(health_router, tags=["health"])
app.include_router(session_router, tags=["session"])
app.include_router(businesses_router, tags=["businesses"])
app.include_router(queue_router, tags=["queue"])
app.include_router(ws_router, tags=["live"])

@app.exception_handler(QnnectError)
async def domain_error(request: Request, exc: QnnectError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

@app.get("/")
async def root():
    return {
        "status": "ok",
        "see": ["/healthz", "/session", "/businesses", "/me/queue", "/businesses/mine/queue", "/ws/me/queue"],
    }
