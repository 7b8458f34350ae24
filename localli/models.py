# localli/models.py

from typing import Optional
from datetime import datetime, time, timezone

from sqlalchemy import DateTime, Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

from .config import DEFAULT_SLOT_MINUTES

STATUS_BOOKED = "booked"
STATUS_CANCELLED = "cancelled"

ACTIVE_ONLY = text("status != 'cancelled'")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Business(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    owner_id: int = Field(index=True)

    # wall-clock hours local to the business; None until the owner sets them
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    slot_minutes: int = DEFAULT_SLOT_MINUTES

    active: bool = True


class Appointment(SQLModel, table=True):
    # at most one active appointment per (business, date, slot); cancelled rows are ignored
    __table_args__ = (
        Index(
            "uq_active_business_date_slot",
            "business_id",
            "date",
            "slot",
            unique=True,
            sqlite_where=ACTIVE_ONLY,
            postgresql_where=ACTIVE_ONLY,
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)
    customer_id: int = Field(index=True)
    date: str  # YYYY-MM-DD
    slot: str  # HH:MM-HH:MM
    confirmed: bool = False
    status: str = STATUS_BOOKED

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))

    @property
    def is_active(self) -> bool:
        return self.status != STATUS_CANCELLED


class OutboxEvent(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    kind: str = Field(index=True)
    appointment_id: int
    payload: dict = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
    dispatched_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), index=True))
