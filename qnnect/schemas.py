# qnnect/schemas.py

# Pydantic schemas for API request/response models.
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qnnect.context import View
from qnnect.models import BusinessType, QueueStatus
from qnnect.utils.days import aware_utc


class BusinessIn(BaseModel):
    name: str = Field(min_length=1)
    type: BusinessType = BusinessType.clinic
    description: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    max_daily_capacity: int = Field(default=100, gt=0)
    avg_service_time: int = Field(default=15, ge=0)


class BusinessOut(BaseModel):
    id: str
    name: str
    type: BusinessType
    description: str
    address: str
    phone: str
    email: str
    max_daily_capacity: int
    avg_service_time: int
    owner_id: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return aware_utc(v)


class ProfileOut(BaseModel):
    id: str
    full_name: str
    phone: Optional[str] = None
    notification_enabled: bool
    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    notification_enabled: Optional[bool] = None

    # omitted means "leave as is"; explicit null is only meaningful for phone
    @field_validator("full_name", "notification_enabled")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class SessionOut(BaseModel):
    view: View
    user_id: Optional[str] = None
    profile: Optional[ProfileOut] = None


class QueueEntryOut(BaseModel):
    id: str
    business_id: str
    user_id: str
    queue_number: int
    service_day: date
    status: QueueStatus
    estimated_wait_time: int
    joined_at: datetime
    called_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    notes: str = ""
    model_config = ConfigDict(from_attributes=True)

    # SQLite returns naive datetimes; everything stored is UTC
    @field_validator("joined_at", "called_at", "completed_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return aware_utc(v)


class JoinIn(BaseModel):
    notes: str = ""


class AdvanceIn(BaseModel):
    status: QueueStatus


class MyQueueEntry(QueueEntryOut):
    position: int = 0
    business: BusinessOut


class BusinessQueueEntry(QueueEntryOut):
    full_name: Optional[str] = None
    phone: Optional[str] = None


class QueueStats(BaseModel):
    waiting: int
    serving: int
    completed_today: int
    avg_wait_time: int


class AnalyticsOut(BaseModel):
    business_id: str
    date: date
    total_served: int
    total_cancelled: int
    avg_wait_time: float
    peak_hour: int
    model_config = ConfigDict(from_attributes=True)


class Snapshot(BaseModel):
    kind: str = "snapshot"
    entries: List[QueueEntryOut]
