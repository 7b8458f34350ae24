# localli/core/availability.py

from dataclasses import dataclass
from typing import List

from ..models import Business
from .directory import BusinessDirectory
from .errors import ConfigurationError
from .ledger import BookingLedger
from .slots import SlotWindow, derive_slots, parse_day


@dataclass(frozen=True)
class SlotAvailability:
    label: str
    available: bool


class AvailabilityResolver:
    """Marks a business's derived slots for one day as booked or free."""

    def __init__(self, businesses: BusinessDirectory, ledger: BookingLedger):
        self.businesses = businesses
        self.ledger = ledger

    def candidate_slots(self, business: Business, on_date) -> List[SlotWindow]:
        if business.open_time is None or business.close_time is None:
            raise ConfigurationError(f"Business {business.id} has no opening hours set")
        return derive_slots(business.open_time, business.close_time, business.slot_minutes, parse_day(on_date))

    def slot_labels(self, business: Business, on_date) -> List[str]:
        return [window.label for window in self.candidate_slots(business, on_date)]

    def get_availability(self, business_id: int, on_date) -> List[SlotAvailability]:
        day = parse_day(on_date)

        # 1) Business must exist and have hours
        business = self.businesses.get_bookable(business_id)
        candidates = self.candidate_slots(business, day)

        # 2) Slots already held by active appointments
        booked = {a.slot for a in self.ledger.active_for(business.id, day.isoformat())}

        # 3) Same order as the derived schedule
        return [SlotAvailability(label=w.label, available=w.label not in booked) for w in candidates]
