# localli/core/reservations.py
"""
Reservation service: book, reschedule, cancel and confirm appointments.

State machine::

    booked (unconfirmed) --confirm (owner)--> booked (confirmed)
    booked (either)      --cancel (customer or owner)--> cancelled (terminal)

Rescheduling keeps the appointment booked but clears its confirmation.
Every error propagates to the caller unchanged; nothing here retries.
"""

import logging
from typing import List, Optional

from ..models import Appointment, Business
from .authz import Actor, owns_business, require_can_modify
from .availability import AvailabilityResolver
from .directory import BusinessDirectory
from .errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from .events import BookingCancelled, BookingCreated, BookingRescheduled, EventSink
from .ledger import BookingLedger
from .slots import parse_day, parse_slot_label, slot_start

logger = logging.getLogger(__name__)


class ReservationService:
    def __init__(
        self,
        ledger: BookingLedger,
        businesses: BusinessDirectory,
        events: EventSink,
        availability: Optional[AvailabilityResolver] = None,
    ):
        self.ledger = ledger
        self.businesses = businesses
        self.events = events
        self.availability = availability or AvailabilityResolver(businesses, ledger)

    def book(self, actor: Actor, business_id: Optional[int], on_date, slot: Optional[str]) -> Appointment:
        if not actor.is_customer:
            raise ForbiddenError("Only customers can book appointments")
        if business_id is None or not on_date or not slot:
            raise ValidationError("businessId, date and slot are required")

        day = parse_day(on_date)
        parse_slot_label(slot)

        business = self.businesses.get_bookable(business_id)
        self._require_offered(business, day, slot)

        appointment = Appointment(
            business_id=business.id,
            customer_id=actor.id,
            date=day.isoformat(),
            slot=slot,
        )
        start = slot_start(day, slot)

        def stage_event():
            # appointment.id is assigned by the flush that precedes this
            self.events.publish(BookingCreated(appointment_id=appointment.id, start_datetime=start))

        try:
            appointment = self.ledger.create(appointment, before_commit=stage_event)
        except ConflictError:
            logger.info("Booking conflict: business=%s date=%s slot=%s", business.id, day, slot)
            raise

        logger.info(
            "Booked appointment %s: business=%s date=%s slot=%s customer=%s",
            appointment.id, business.id, appointment.date, slot, actor.id,
        )
        return appointment

    def reschedule(self, actor: Actor, appointment_id: int, new_date, new_slot: Optional[str]) -> Appointment:
        if not new_date or not new_slot:
            raise ValidationError("newDate and newSlot are required")

        appointment = self.ledger.get(appointment_id)
        business = self.businesses.get(appointment.business_id)
        require_can_modify(appointment, business, actor)

        if not appointment.is_active:
            raise ConflictError("Appointment is cancelled")
        if not business.active:
            raise NotFoundError("Business not found")

        day = parse_day(new_date)
        parse_slot_label(new_slot)
        self._require_offered(business, day, new_slot)

        target_date = day.isoformat()
        old_date, old_slot = appointment.date, appointment.slot
        if (old_date, old_slot) == (target_date, new_slot):
            return appointment

        def stage_event():
            self.events.publish(
                BookingRescheduled(appointment_id=appointment_id, start_datetime=slot_start(day, new_slot))
            )

        try:
            appointment = self.ledger.reschedule(
                appointment_id, target_date, new_slot, before_commit=stage_event
            )
        except ConflictError:
            logger.info(
                "Reschedule conflict: appointment=%s target=%s %s", appointment_id, day, new_slot
            )
            raise

        logger.info(
            "Rescheduled appointment %s from %s %s to %s %s",
            appointment.id, old_date, old_slot, appointment.date, appointment.slot,
        )
        return appointment

    def cancel(self, actor: Actor, appointment_id: int) -> Appointment:
        appointment = self.ledger.get(appointment_id)
        business = self.businesses.get(appointment.business_id)
        require_can_modify(appointment, business, actor)

        def stage_event():
            self.events.publish(BookingCancelled(appointment_id=appointment_id))

        if self.ledger.cancel_if_active(appointment_id, before_commit=stage_event):
            logger.info("Cancelled appointment %s by actor %s", appointment_id, actor.id)

        return self.ledger.refreshed(appointment_id)

    def confirm(self, actor: Actor, appointment_id: int) -> Appointment:
        appointment = self.ledger.get(appointment_id)
        business = self.businesses.get(appointment.business_id)
        require_can_modify(appointment, business, actor, owner_only=True)

        appointment = self.ledger.confirm(appointment.id)
        logger.info("Confirmed appointment %s", appointment.id)
        return appointment

    def list_mine(self, actor: Actor, status: str = "active") -> List[Appointment]:
        return self.ledger.list_for_customer(actor.id, status=status)

    def list_for_business(self, actor: Actor, business_id: int, status: str = "active") -> List[Appointment]:
        business = self.businesses.get(business_id)
        if not owns_business(business, actor):
            raise ForbiddenError("Not authorized to view this business's appointments")
        return self.ledger.list_for_business(business.id, status=status)

    def list_for_owner(self, actor: Actor, status: str = "active") -> List[Appointment]:
        if not actor.is_owner:
            raise ForbiddenError("Only owners can list business appointments")
        return self.ledger.list_for_owner(actor.id, status=status)

    def _require_offered(self, business: Business, day, slot: str) -> None:
        if slot not in self.availability.slot_labels(business, day):
            raise ValidationError(f"Slot {slot} is not offered by this business on {day.isoformat()}")
