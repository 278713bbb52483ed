# App configuration using Pydantic BaseSettings (loads from .env or defaults).
# Blank connection values or an unknown queue timezone fail at import time.

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./qnnect.sqlite"

    QUEUE_TIMEZONE: str = "UTC"
    EVENT_BUFFER_SIZE: int = 100
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_URL")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("DATABASE_URL must not be empty")
        return v

    @field_validator("QUEUE_TIMEZONE")
    @classmethod
    def _known_tz(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v}") from e
        return v

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.QUEUE_TIMEZONE)

settings = Settings()
