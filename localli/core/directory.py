# localli/core/directory.py

from datetime import time
from typing import List, Optional

from sqlmodel import Session, select

from ..models import Business
from .errors import NotFoundError, ValidationError


class BusinessDirectory:
    """Business lookup; hours are read-only from the booking core's side."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, business_id: int) -> Business:
        business = self.session.get(Business, business_id)
        if business is None:
            raise NotFoundError("Business not found")
        return business

    def get_bookable(self, business_id: int) -> Business:
        business = self.get(business_id)
        if not business.active:
            raise NotFoundError("Business not found")
        return business

    def owned_by(self, owner_id: int) -> List[Business]:
        return list(
            self.session.exec(
                select(Business).where(Business.owner_id == owner_id).order_by(Business.id)
            ).all()
        )

    def create(
        self,
        name: str,
        owner_id: int,
        open_time: Optional[time] = None,
        close_time: Optional[time] = None,
        slot_minutes: Optional[int] = None,
    ) -> Business:
        business = Business(name=name, owner_id=owner_id)
        if slot_minutes is not None:
            business.slot_minutes = slot_minutes
        if open_time is not None or close_time is not None:
            _check_hours(open_time, close_time, business.slot_minutes)
            business.open_time = open_time
            business.close_time = close_time

        self.session.add(business)
        self.session.commit()
        self.session.refresh(business)
        return business

    def set_hours(self, business_id: int, open_time: time, close_time: time, slot_minutes: int) -> Business:
        business = self.get(business_id)
        _check_hours(open_time, close_time, slot_minutes)

        business.open_time = open_time
        business.close_time = close_time
        business.slot_minutes = slot_minutes
        self.session.add(business)
        self.session.commit()
        self.session.refresh(business)
        return business


def _check_hours(open_time, close_time, slot_minutes) -> None:
    if open_time is None or close_time is None:
        raise ValidationError("Both open and close time are required")
    if _has_seconds(open_time) or _has_seconds(close_time):
        raise ValidationError("Hours must be whole minutes")
    if open_time >= close_time:
        raise ValidationError("Open time must be before close time")
    if slot_minutes is None or slot_minutes <= 0:
        raise ValidationError("Slot duration must be a positive number of minutes")


def _has_seconds(value: time) -> bool:
    return bool(value.second or value.microsecond)
