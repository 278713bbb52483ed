# qnnect/models.py

# SQLAlchemy ORM models defining database schema for the project.
# Includes businesses, user_profiles, queue_entries, queue_counters and business_analytics.
# queue_counters is the per-business, per-day sequence that queue numbers are reserved from.
# Unique constraints back the one-business-per-owner and one-number-per-day rules.


from __future__ import annotations
import enum
from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Boolean, Date, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from qnnect.db import Base


DayType = date  # "date" is also a column name on BusinessAnalytics


def _new_id() -> str:
    return uuid4().hex

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BusinessType(str, enum.Enum):
    hospital = "hospital"
    clinic = "clinic"
    restaurant = "restaurant"


class QueueStatus(str, enum.Enum):
    waiting = "waiting"
    serving = "serving"
    completed = "completed"
    cancelled = "cancelled"


class Business(Base):
    __tablename__ = "businesses"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String, index=True, nullable=False)
    type: Mapped[BusinessType] = mapped_column(Enum(BusinessType), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    address: Mapped[str] = mapped_column(String, default="")
    phone: Mapped[str] = mapped_column(String, default="")
    email: Mapped[str] = mapped_column(String, default="")
    max_daily_capacity: Mapped[int] = mapped_column(Integer, default=100, nullable=False)
    avg_service_time: Mapped[int] = mapped_column(Integer, default=15, nullable=False)  # minutes
    owner_id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String, primary_key=True)  # account id from the auth provider
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    notification_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class QueueEntry(Base):
    __tablename__ = "queue_entries"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    business_id: Mapped[str] = mapped_column(ForeignKey("businesses.id"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    queue_number: Mapped[int] = mapped_column(Integer, nullable=False)
    service_day: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[QueueStatus] = mapped_column(Enum(QueueStatus), default=QueueStatus.waiting, nullable=False)
    estimated_wait_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # minutes
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    called_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str] = mapped_column(Text, default="")

    __table_args__ = (
        UniqueConstraint("business_id", "service_day", "queue_number", name="uq_entry_number_per_day"),
        Index("idx_entry_business_status", "business_id", "status"),
    )


class QueueCounter(Base):
    __tablename__ = "queue_counters"

    business_id: Mapped[str] = mapped_column(ForeignKey("businesses.id"), primary_key=True)
    service_day: Mapped[date] = mapped_column(Date, primary_key=True)
    last_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class BusinessAnalytics(Base):
    __tablename__ = "business_analytics"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    business_id: Mapped[str] = mapped_column(ForeignKey("businesses.id"), index=True, nullable=False)
    date: Mapped[DayType] = mapped_column(Date, nullable=False)
    total_served: Mapped[int] = mapped_column(Integer, default=0)
    total_cancelled: Mapped[int] = mapped_column(Integer, default=0)
    avg_wait_time: Mapped[float] = mapped_column(Float, default=0.0)  # minutes
    peak_hour: Mapped[int] = mapped_column(Integer, default=0)  # 0..23, queue timezone

    __table_args__ = (
        UniqueConstraint("business_id", "date", name="uq_analytics_business_day"),
    )
