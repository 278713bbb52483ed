# Database setup with SQLAlchemy async engine and session factory.
# Uses declarative_base for ORM models and get_session as a FastAPI dependency.
# SQLite URLs get a NullPool: aiosqlite connections are opened per session.


from typing import AsyncIterator
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from qnnect.config import settings

Base = declarative_base()

def make_engine(url: str) -> AsyncEngine:
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False, future=True, poolclass=NullPool)
    return create_async_engine(url, echo=False, future=True)

engine = make_engine(settings.DATABASE_URL)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session
