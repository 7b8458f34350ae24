# localli/core/ledger.py
"""
Booking ledger: the only writer of Appointment rows.

Slot uniqueness is enforced by the ``uq_active_business_date_slot`` partial
index, so two concurrent writers for the same (business, date, slot) cannot
both commit; the loser gets ConflictError.

Status changes are conditional UPDATEs (``status != 'cancelled'``) so a cancel
committed by another request between our read and our write is never
overwritten. Each write accepts a ``before_commit`` callback that runs inside
the same transaction; outbox rows staged there commit or roll back with it.
"""

import logging
from typing import Callable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..models import Appointment, Business, STATUS_CANCELLED, utcnow
from .errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("active", "cancelled", "all")

BeforeCommit = Optional[Callable[[], None]]


class BookingLedger:
    def __init__(self, session: Session):
        self.session = session

    def get(self, appointment_id: int) -> Appointment:
        appointment = self.session.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    def refreshed(self, appointment_id: int) -> Appointment:
        """Re-read the stored row, discarding whatever this session had cached."""
        appointment = self.get(appointment_id)
        self.session.refresh(appointment)
        return appointment

    def create(self, appointment: Appointment, before_commit: BeforeCommit = None) -> Appointment:
        self.session.add(appointment)
        try:
            self.session.flush()  # fills appointment.id, checks the index
            if before_commit is not None:
                before_commit()
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Slot already booked")
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(appointment)
        return appointment

    def reschedule(
        self,
        appointment_id: int,
        new_date: str,
        new_slot: str,
        reset_confirmation: bool = True,
        before_commit: BeforeCommit = None,
    ) -> Appointment:
        appointment = self.get(appointment_id)
        if not appointment.is_active:
            raise ConflictError("Appointment is cancelled")

        if appointment.date == new_date and appointment.slot == new_slot:
            return appointment

        values = {"date": new_date, "slot": new_slot, "updated_at": utcnow()}
        if reset_confirmation:
            values["confirmed"] = False

        try:
            self._update_active(appointment_id, values)
            if before_commit is not None:
                before_commit()
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("Slot already booked")
        except Exception:
            # rollback expires the instance, so it reloads the stored date/slot
            self.session.rollback()
            raise

        self.session.refresh(appointment)
        return appointment

    def cancel(self, appointment_id: int, before_commit: BeforeCommit = None) -> Appointment:
        """Soft-delete. Cancelling twice returns the already-cancelled row."""
        self.cancel_if_active(appointment_id, before_commit=before_commit)
        return self.refreshed(appointment_id)

    def cancel_if_active(self, appointment_id: int, before_commit: BeforeCommit = None) -> bool:
        """
        Flip an active appointment to cancelled.

        Returns True only for the call that made the transition; ``before_commit``
        runs only in that case.
        """
        appointment = self.get(appointment_id)
        if not appointment.is_active:
            return False

        try:
            self._update_active(appointment_id, {"status": STATUS_CANCELLED, "updated_at": utcnow()})
            if before_commit is not None:
                before_commit()
            self.session.commit()
        except ConflictError:
            # cancelled by someone else in the meantime
            self.session.rollback()
            return False
        except Exception:
            self.session.rollback()
            raise
        return True

    def confirm(self, appointment_id: int) -> Appointment:
        appointment = self.get(appointment_id)
        if not appointment.is_active:
            raise ConflictError("Appointment is cancelled")
        if appointment.confirmed:
            return appointment

        try:
            self._update_active(appointment_id, {"confirmed": True, "updated_at": utcnow()})
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(appointment)
        return appointment

    def _update_active(self, appointment_id: int, values: dict) -> None:
        stmt = (
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .where(Appointment.status != STATUS_CANCELLED)
            .values(**values)
        )
        result = self.session.connection().execute(stmt)
        if result.rowcount != 1:
            raise ConflictError("Appointment is cancelled")

    def active_for(self, business_id: int, on_date: str) -> List[Appointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.business_id == business_id)
            .where(Appointment.date == on_date)
            .where(Appointment.status != STATUS_CANCELLED)
            .order_by(Appointment.slot)
        )
        return list(self.session.exec(stmt).all())

    def list_for_customer(self, customer_id: int, status: str = "active") -> List[Appointment]:
        stmt = select(Appointment).where(Appointment.customer_id == customer_id)
        return self._listing(stmt, status)

    def list_for_business(self, business_id: int, status: str = "active") -> List[Appointment]:
        stmt = select(Appointment).where(Appointment.business_id == business_id)
        return self._listing(stmt, status)

    def list_for_owner(self, owner_id: int, status: str = "active") -> List[Appointment]:
        stmt = (
            select(Appointment)
            .join(Business, Business.id == Appointment.business_id)
            .where(Business.owner_id == owner_id)
        )
        return self._listing(stmt, status)

    def _listing(self, stmt, status: str) -> List[Appointment]:
        if status not in STATUS_FILTERS:
            raise ValidationError("status must be 'active', 'cancelled', or 'all'")

        if status == "active":
            stmt = stmt.where(Appointment.status != STATUS_CANCELLED)
        elif status == "cancelled":
            stmt = stmt.where(Appointment.status == STATUS_CANCELLED)

        # canonical date/slot strings sort chronologically
        stmt = stmt.order_by(Appointment.date, Appointment.slot, Appointment.id)
        return list(self.session.exec(stmt).all())
