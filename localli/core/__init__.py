# localli/core/__init__.py
"""Slot derivation and double-booking prevention."""

from .authz import Actor, ROLE_CUSTOMER, ROLE_OWNER, can_modify, require_can_modify
from .availability import AvailabilityResolver, SlotAvailability
from .directory import BusinessDirectory
from .errors import (
    BookingError,
    ConfigurationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from .events import (
    BookingCancelled,
    BookingCreated,
    BookingRescheduled,
    EventSink,
    InMemoryEventQueue,
    OutboxEventSink,
)
from .ledger import BookingLedger
from .reservations import ReservationService
from .slots import SlotWindow, derive_slots, format_slot_label, parse_day, parse_slot_label

__all__ = [
    "Actor",
    "ROLE_CUSTOMER",
    "ROLE_OWNER",
    "can_modify",
    "require_can_modify",
    "AvailabilityResolver",
    "SlotAvailability",
    "BusinessDirectory",
    "BookingError",
    "ConfigurationError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
    "BookingCancelled",
    "BookingCreated",
    "BookingRescheduled",
    "EventSink",
    "InMemoryEventQueue",
    "OutboxEventSink",
    "BookingLedger",
    "ReservationService",
    "SlotWindow",
    "derive_slots",
    "format_slot_label",
    "parse_day",
    "parse_slot_label",
]
