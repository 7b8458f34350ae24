# localli/schemas.py

from datetime import datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AppointmentCreate(BaseModel):
    # presence is checked by the reservation service so missing fields map to 400
    model_config = ConfigDict(populate_by_name=True)

    business_id: Optional[int] = Field(default=None, alias="businessId")
    date: Optional[str] = None  # YYYY-MM-DD
    slot: Optional[str] = None  # HH:MM-HH:MM


class AppointmentReschedule(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_date: Optional[str] = Field(default=None, alias="newDate")
    new_slot: Optional[str] = Field(default=None, alias="newSlot")


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    business_id: int
    customer_id: int
    date: str
    slot: str
    confirmed: bool
    status: str
    created_at: datetime
    updated_at: datetime


class SlotPublic(BaseModel):
    time: str
    available: bool


class BusinessHours(BaseModel):
    open_time: time
    close_time: time
    slot_minutes: int = Field(default=60, gt=0)


class BusinessCreate(BaseModel):
    name: str = Field(min_length=1)
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    slot_minutes: Optional[int] = Field(default=None, gt=0)


class BusinessPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    owner_id: int
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    slot_minutes: int
    active: bool
